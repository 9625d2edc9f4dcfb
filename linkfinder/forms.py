"""Forms for the linkfinder app.

The analysis form validates the JSON body posted by an orchestrator that
has already crawled the site and fetched keyword and search-console
metrics. Documents must be well formed; malformed metric entries are
dropped rather than rejected, since missing metrics are routine.
"""

from __future__ import annotations

from django import forms

from .engine.records import parse_documents, parse_keyword_metrics, parse_page_metrics
from .engine.tiers import SCORE_KINDS


class AnalysisForm(forms.Form):
    """Form used to validate a full analysis request."""

    documents = forms.JSONField(
        required=False,
        help_text='List of crawled pages as {"url", "text"} objects or [url, text] pairs.',
    )
    keyword_metrics = forms.JSONField(
        required=False,
        help_text='Mapping of keyword to {"volume", "difficulty", "impressions"}.',
    )
    page_metrics = forms.JSONField(
        required=False,
        help_text='Mapping of page url to {"impressions", "clicks", "position", "incoming_links"}.',
    )
    top_n = forms.IntegerField(
        required=False,
        min_value=1,
        max_value=100,
        help_text='Number of keywords extracted per page (default 20).',
    )
    is_html_input = forms.BooleanField(
        required=False,
        help_text='Treat every document body as HTML.',
    )

    def clean_documents(self) -> list:
        value = self.cleaned_data.get('documents')
        if value is None:
            return []
        if not isinstance(value, list):
            raise forms.ValidationError('Documents must be a list.')
        return value

    def clean_keyword_metrics(self) -> dict:
        value = self.cleaned_data.get('keyword_metrics')
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise forms.ValidationError('Keyword metrics must be an object keyed by keyword.')
        return parse_keyword_metrics(value)

    def clean_page_metrics(self) -> dict:
        value = self.cleaned_data.get('page_metrics')
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise forms.ValidationError('Page metrics must be an object keyed by url.')
        return parse_page_metrics(value)

    def clean(self) -> dict:  # type: ignore[override]
        cleaned_data = super().clean()
        raw_documents = cleaned_data.get('documents')
        if raw_documents is None:
            return cleaned_data
        try:
            cleaned_data['documents'] = parse_documents(
                raw_documents,
                is_html=bool(cleaned_data.get('is_html_input')),
            )
        except ValueError as exc:
            self.add_error('documents', str(exc))
        return cleaned_data


class ScoreTierForm(forms.Form):
    """Query parameters for a score tier lookup."""

    score = forms.FloatField()
    kind = forms.ChoiceField(
        choices=[(kind, kind) for kind in SCORE_KINDS],
        required=False,
    )

    def clean_kind(self) -> str:
        return self.cleaned_data.get('kind') or 'priority'
