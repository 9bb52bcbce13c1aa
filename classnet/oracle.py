# everything around the name-normalization oracle EXCEPT the call itself.
# the oracle is an llm, so treat its output as untrusted: any field can be
# missing or the wrong type and we still have to produce something

import math
import logging
from classnet.constants import (
    DEFAULT_MODEL, FALLBACK_MODEL, MODEL_ALIASES,
    UNKNOWN_STUDENT_RATIO, MIN_STUDENT_COUNT_RATIO, MAX_STUDENT_COUNT_RATIO,
)
from classnet.data_loader import SurveyLoader, SurveyFormatError
from classnet.relationships import sanitize_relationships

logger = logging.getLogger(__name__)


def _clean_strings(values) -> list:
    if not isinstance(values, (list, tuple)):
        return []
    out = []
    for v in values:
        s = '' if v is None else str(v).strip()
        if s:
            out.append(s)
    return out


def normalize_oracle_payload(payload) -> dict:
    """
    {students, relationships, metadata} with every field made safe.

    students is only a hint: any name a relationship mentions is added to it,
    so someone who only shows up as a nominee still becomes a node.
    """
    obj = payload if isinstance(payload, dict) else {}

    relationships = sanitize_relationships(obj.get('relationships'))

    students = []
    seen = set()
    for name in _clean_strings(obj.get('students')) + [n for r in relationships for n in (r['from'], r['to'])]:
        if name not in seen:
            seen.add(name)
            students.append(name)

    meta = obj.get('metadata') if isinstance(obj.get('metadata'), dict) else {}

    question_types = {}
    raw_types = meta.get('question_types')
    if isinstance(raw_types, dict):
        for k, v in raw_types.items():
            k = '' if k is None else str(k).strip()
            v = '' if v is None else str(v).strip()
            if k and v:
                question_types[k] = v

    return {
        'students': students,
        'relationships': relationships,
        'metadata': {
            'question_types': question_types,
            'normalization_notes': _clean_strings(meta.get('normalization_notes')),
        },
    }


def resolve_model_name(model=None) -> str:
    key = '' if model is None else str(model).strip().lower()
    if not key:
        return DEFAULT_MODEL
    return MODEL_ALIASES.get(key, DEFAULT_MODEL)


def collect_quality_signals(csv_text: str) -> dict:

    # what the raw csv says before the oracle touches it.
    # a csv we cant make sense of just gives empty signals here, not an error.
    # ragged rows are merged by the loader so they still count

    try:
        loader = SurveyLoader.from_text(csv_text)
    except SurveyFormatError:
        return {'respondent_count': 0, 'raw_names': set()}

    if not loader.rows:
        return {'respondent_count': 0, 'raw_names': set()}

    return {
        'respondent_count': loader.respondent_count(),
        'raw_names': loader.raw_name_set(),
    }


def evaluate_quality(normalized: dict, signals: dict) -> dict:

    students = normalized.get('students', [])
    respondents = max(signals.get('respondent_count', 0), 1)
    raw_names = signals.get('raw_names', set())

    return {
        'unknown_student_count': sum(1 for name in students if name not in raw_names),
        'student_count_ratio': len(students) / respondents,
    }


def should_fallback(report: dict, respondent_count: int) -> bool:

    # invented names or a student count way off from the respondent count
    # means the fast model probably mangled the roster

    # half-up, not python's round() which goes to even on .5
    unknown_limit = max(1, int(respondent_count * UNKNOWN_STUDENT_RATIO + 0.5))
    if report['unknown_student_count'] > unknown_limit:
        logger.info("oracle invented %d names (limit %d), fallback model recommended",
                    report['unknown_student_count'], unknown_limit)
        return True
    ratio = report['student_count_ratio']
    if ratio < MIN_STUDENT_COUNT_RATIO or ratio > MAX_STUDENT_COUNT_RATIO:
        logger.info("student/respondent ratio %.2f out of range, fallback model recommended", ratio)
        return True
    return False


def choose_model(report: dict, respondent_count: int, requested=None) -> str:

    # the gate only second-guesses the fast default model.
    # if someone asked for a specific bigger model we keep it

    model = resolve_model_name(requested)
    if model == DEFAULT_MODEL and should_fallback(report, respondent_count):
        return FALLBACK_MODEL
    return model


def payload_metadata(payload) -> dict:

    # model bookkeeping the api layer attaches, passed through if well typed

    obj = payload if isinstance(payload, dict) else {}
    meta = obj.get('metadata') if isinstance(obj.get('metadata'), dict) else {}
    quality = meta.get('quality_signals') if isinstance(meta.get('quality_signals'), dict) else {}

    def number(value):
        if isinstance(value, bool) or value is None:
            return None
        try:
            f = float(value)
        except (TypeError, ValueError):
            return None
        return f if math.isfinite(f) else None

    out = {}
    if isinstance(meta.get('model_used'), str):
        out['modelUsed'] = meta['model_used']
    if isinstance(meta.get('primary_model'), str):
        out['primaryModel'] = meta['primary_model']
    if isinstance(meta.get('fallback_triggered'), bool):
        out['fallbackTriggered'] = meta['fallback_triggered']

    signals = {
        'respondentCount': number(quality.get('respondent_count')),
        'unknownStudentCount': number(quality.get('unknown_student_count')),
        'studentCountRatio': number(quality.get('student_count_ratio')),
    }
    signals = {k: v for k, v in signals.items() if v is not None}
    if signals:
        out['qualitySignals'] = signals

    return out
