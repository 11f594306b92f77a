import math
from datetime import date, datetime
from typing import Optional, Sequence

from dateutil.relativedelta import relativedelta

from .phases import calculate_median_completion, determine_project_phase
from .schemas import PortfolioSnapshot, ProjectRecord, RagStatus

# Burn rate is hours consumed spread over a fixed 30-day window
BURN_WINDOW_DAYS = 30

def _r2(x: float) -> float:
    return round(x, 2)

def _ratio_pct(num: float, den: float) -> float:
    # zero denominator -> 0 rather than inf/nan, which JSON cannot carry
    return num / den * 100 if den else 0.0

def aggregate(projects: Sequence[ProjectRecord]) -> PortfolioSnapshot:
    total = len(projects)
    allocated = sum(p.hours_allocated for p in projects)
    consumed = sum(p.hours_consumed for p in projects)
    completion_sum = sum(p.completion_percentage for p in projects)

    return PortfolioSnapshot(
        total_projects=total,
        total_hours_allocated=_r2(allocated),
        total_hours_consumed=_r2(consumed),
        total_hours_remaining=_r2(allocated - consumed),
        avg_completion=_r2(completion_sum / total) if total else 0.0,
        median_completion=_r2(calculate_median_completion(projects)),
        projects_on_track=sum(1 for p in projects if p.rag_status == RagStatus.GREEN.value),
        projects_at_risk=sum(1 for p in projects if p.rag_status == RagStatus.AMBER.value),
        projects_overdue=sum(1 for p in projects if p.rag_status == RagStatus.RED.value),
        efficiency_ratio=_r2(_ratio_pct(allocated, consumed)),
    )

def project_metrics(project: ProjectRecord) -> dict:
    remaining = project.hours_allocated - project.hours_consumed
    burn_rate = _r2(project.hours_consumed / BURN_WINDOW_DAYS)
    days_to_completion = math.ceil(remaining / burn_rate) if burn_rate else None
    return {
        "projectCode": project.project_code,
        "hoursRemaining": _r2(remaining),
        "efficiency": _r2(_ratio_pct(project.hours_allocated, project.hours_consumed)),
        "burnRate": burn_rate,
        "daysToCompletion": days_to_completion,
        "phase": determine_project_phase(project.completion_percentage).id,
    }

def _parse_date(s: Optional[str]) -> Optional[date]:
    if not s:
        return None
    for fmt in ("%Y-%m-%d", "%d.%m.%Y", "%Y-%m"):
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    return None

def month_iter(start: date, end: date):
    cur = date(start.year, start.month, 1)
    while cur <= end:
        yield cur.strftime("%Y-%m")
        cur += relativedelta(months=1)

def build_timeline(projects: Sequence[ProjectRecord], today: date) -> dict:
    """
    Layout data for the Gantt chart.

    Offsets are fractions of the window from the earliest start date to the
    latest target date. ``todayOffset`` is not clamped, so a value outside
    0..1 means today lies outside the window.
    """
    spans = []
    for p in projects:
        start = _parse_date(p.start_date)
        end = _parse_date(p.target_completion_date)
        if start and end:
            spans.append((p, start, end))

    if not spans:
        return {"start": None, "end": None, "months": [], "todayOffset": None, "bars": []}

    lo = min(s for _, s, _ in spans)
    hi = max(e for _, _, e in spans)
    window = (hi - lo).days

    def offset(d: date) -> float:
        return round((d - lo).days / window, 4) if window else 0.0

    bars = [{
        "projectCode": p.project_code,
        "projectName": p.project_name,
        "startOffset": offset(start),
        "widthFraction": round((end - start).days / window, 4) if window else 0.0,
        "completion": p.completion_percentage,
        "ragStatus": p.rag_status,
    } for p, start, end in spans]

    return {
        "start": lo.isoformat(),
        "end": hi.isoformat(),
        "months": list(month_iter(lo, hi)),
        "todayOffset": offset(today),
        "bars": bars,
    }
