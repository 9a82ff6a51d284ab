"""Students app: persisted marks records and the REST API serving them.

The REST store adapter (`stores.rest.RestStore`) talks to the endpoints
defined here. The API re-validates every submission, so the 0..100 range and
the non-empty name hold even for clients that skip the dashboard form.
"""
