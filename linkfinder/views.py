"""Django views for the linkfinder app.

The views are a thin JSON transport around the opportunity engine: they
validate the posted documents and metrics, run one analysis and return the
result as plain key/value records. Nothing is fetched or stored here.
"""

from __future__ import annotations

import json
import logging

from django.conf import settings
from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from .engine import analyze as run_analysis
from .engine import get_score_tier
from .engine.config import EngineConfig, load_config
from .forms import AnalysisForm, ScoreTierForm

logger = logging.getLogger(__name__)


def _engine_config(top_n: int | None) -> EngineConfig:
    config = load_config(getattr(settings, 'LINKFINDER_ENGINE_CONFIG', None))
    if top_n:
        config = EngineConfig({**config.raw, 'top_n': top_n})
    return config


def _error_response(errors: dict, status: int = 400) -> JsonResponse:
    return JsonResponse({'errors': errors}, status=status)


@csrf_exempt
@require_POST
def analyze(request: HttpRequest) -> JsonResponse:
    """Analyze posted pages and metrics and return ranked link opportunities."""

    try:
        payload = json.loads(request.body or b'{}')
    except (UnicodeDecodeError, ValueError):
        return _error_response({'__all__': [{'message': 'Request body must be valid JSON.', 'code': 'invalid'}]})
    if not isinstance(payload, dict):
        return _error_response({'__all__': [{'message': 'Request body must be a JSON object.', 'code': 'invalid'}]})

    form = AnalysisForm(payload)
    if not form.is_valid():
        logger.info('Rejected analysis request: %s', form.errors.as_json())
        return _error_response(form.errors.get_json_data())

    documents = form.cleaned_data['documents']
    keyword_metrics = form.cleaned_data['keyword_metrics']
    page_metrics = form.cleaned_data['page_metrics']
    logger.info(
        'Starting analysis: %d documents, %d keyword metrics, %d page metrics',
        len(documents),
        len(keyword_metrics),
        len(page_metrics),
    )

    result = run_analysis(
        documents,
        keyword_metrics,
        page_metrics,
        _engine_config(form.cleaned_data.get('top_n')),
    )
    return JsonResponse(result.as_dict())


@require_GET
def score_tier(request: HttpRequest) -> JsonResponse:
    """Return the display tier for ``?score=<number>&kind=<keyword|page|priority>``."""

    form = ScoreTierForm(request.GET)
    if not form.is_valid():
        return _error_response(form.errors.get_json_data())
    kind = form.cleaned_data['kind']
    tier = get_score_tier(form.cleaned_data['score'], kind)
    return JsonResponse({'kind': kind, 'tier': tier.tier, 'color': tier.color, 'label': tier.label})
