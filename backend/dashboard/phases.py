from typing import List, Sequence

from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

from .schemas import CamelModel, ProjectRecord


class _Frozen(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class BackgroundGradient(_Frozen):
    primary: str
    secondary: str
    angle: int = 135


class ParticleEffect(_Frozen):
    type: str  # matrix | particles | waves | confetti | blueprints | splash | launch
    density: int
    velocity: float
    color: str


class ProjectPhase(_Frozen):
    id: str
    name: str
    min_progress: float
    max_progress: float
    background_gradient: BackgroundGradient
    particle_effect: ParticleEffect
    transition_duration: int = 5000  # ms

    def contains(self, percentage: float) -> bool:
        return self.min_progress <= percentage <= self.max_progress


def _phase(id, name, lo, hi, primary, secondary, effect, density, velocity, color):
    return ProjectPhase(
        id=id, name=name, min_progress=lo, max_progress=hi,
        background_gradient=BackgroundGradient(primary=primary, secondary=secondary),
        particle_effect=ParticleEffect(type=effect, density=density, velocity=velocity, color=color),
    )

# Ordered; ranges are inclusive on both ends and partition 0..100.
PROJECT_PHASES: List[ProjectPhase] = [
    _phase("inception",   "Inception",    0,   5, "#001d31", "#1a1a2e", "particles",  30, 0.5, "#4A90E2"),
    _phase("planning",    "Planning",     6,  20, "#001d31", "#16213e", "blueprints", 20, 0.3, "#6B9BD1"),
    _phase("design",      "Design",      21,  40, "#820021", "#c9184a", "splash",     25, 0.8, "#FF6B9D"),
    _phase("development", "Development", 41,  70, "#002718", "#004d00", "matrix",     40, 1.2, "#00FF41"),
    _phase("testing",     "Testing",     71,  85, "#B8860B", "#DAA520", "waves",      15, 0.6, "#FFD700"),
    _phase("deployment",  "Deployment",  86,  95, "#2F6FED", "#0047AB", "launch",     35, 1.5, "#4A9FFF"),
    _phase("complete",    "Complete",    96, 100, "#7B68EE", "#9370DB", "confetti",   50, 2.0, "#DA70D6"),
]

def determine_project_phase(percentage: float, phases: Sequence[ProjectPhase] = PROJECT_PHASES) -> ProjectPhase:
    """
    Map a completion percentage to its phase.

    First match in table order wins. Anything that matches no range
    (negative, above 100, between integer bounds, NaN) falls back to the
    first phase rather than raising.
    """
    for phase in phases:
        if phase.contains(percentage):
            return phase
    return phases[0]

def calculate_median_completion(projects: Sequence[ProjectRecord]) -> float:
    if not projects:
        return 0.0
    values = sorted(p.completion_percentage for p in projects)
    mid = len(values) // 2
    if len(values) % 2 == 0:
        return (values[mid - 1] + values[mid]) / 2
    return values[mid]
