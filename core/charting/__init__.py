"""Chart payload helpers for the dashboard.

The chart itself is drawn in the browser with Chart.js; this package turns
feed state into the labels/datasets payload the page script consumes.
"""
