"""Forms for the dashboard submission workflow."""

from __future__ import annotations

from django import forms

from scores.validation import MARKS_MAX, MARKS_MIN, ValidationError, validate_submission


class RecordSubmissionForm(forms.Form):
    """Collect a candidate name and marks.

    Both fields are declared optional so the shared validation in
    `scores.validation` produces the single inline error message instead of
    Django's per-field "required" errors.
    """

    name = forms.CharField(
        required=False,
        strip=False,
        max_length=200,
        label="Name",
        widget=forms.TextInput(attrs={"placeholder": "Candidate Name", "autocomplete": "off"}),
    )
    marks = forms.CharField(
        required=False,
        strip=False,
        label="Marks",
        widget=forms.NumberInput(attrs={"placeholder": "Total Marks", "step": "any"}),
    )

    def __init__(self, *args, enforce_range: bool, **kwargs) -> None:
        """Bind the form and configure range enforcement.

        Args:
            enforce_range: Require marks within 0..100; also sets the input's
                min/max attributes.
        """

        super().__init__(*args, **kwargs)
        self.enforce_range = enforce_range
        if enforce_range:
            self.fields["marks"].widget.attrs.update({"min": str(MARKS_MIN), "max": str(MARKS_MAX)})

    def clean(self) -> dict[str, object]:
        """Validate name + marks together and expose `submission`.

        Returns:
            Cleaned data including a `submission` entry.
        """

        cleaned = super().clean() or {}
        if self.has_error("name") or self.has_error("marks"):
            return cleaned
        try:
            cleaned["submission"] = validate_submission(
                cleaned.get("name"),
                cleaned.get("marks"),
                enforce_range=self.enforce_range,
            )
        except ValidationError as exc:
            raise forms.ValidationError(str(exc)) from exc
        return cleaned
