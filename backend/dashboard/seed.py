import logging
from sqlalchemy.orm import Session

from . import kv

logger = logging.getLogger(__name__)

INIT_FLAG_KEY = "schema_initialized"

def _project(code, name, client, description, phase, completion, allocated, consumed, start, target, priority, rag):
    return {
        "projectCode": code, "projectName": name, "clientName": client, "description": description,
        "currentPhase": phase, "completionPercentage": completion,
        "hoursAllocated": allocated, "hoursConsumed": consumed,
        "startDate": start, "targetCompletionDate": target,
        "priority": priority, "ragStatus": rag,
    }

INITIAL_PROJECTS = [
    _project("PRJ-001", "Paulean AI v2.0", "Mathematics Department",
             "Advanced AI-powered mathematics tutoring system with personalized learning paths",
             "Development", 80.0, 320.0, 256.0, "2025-01-15", "2025-11-30", "High", "Green"),
    _project("PRJ-002", "Advanced Grades & Assessment System", "Academic Administration",
             "Comprehensive grading and assessment platform with analytics dashboard",
             "Development", 65.0, 280.0, 182.0, "2025-02-01", "2025-12-15", "Critical", "Amber"),
    _project("PRJ-003", "Form Three Portal", "Lower School",
             "Dedicated student portal for Form Three with learning resources and communication tools",
             "Development", 55.0, 200.0, 110.0, "2025-02-15", "2025-11-20", "Medium", "Green"),
    _project("PRJ-004", "Careers Guidance Platform", "Student Services",
             "Interactive platform for university guidance, career exploration, and alumni connections",
             "Development", 70.0, 240.0, 168.0, "2025-01-20", "2025-10-31", "High", "Green"),
    _project("PRJ-005", "Feedback & Lesson Observations v2", "Teaching & Learning",
             "Enhanced system for lesson observations, peer feedback, and continuous professional development",
             "Planning", 25.0, 180.0, 45.0, "2025-03-01", "2025-12-30", "Medium", "Green"),
    _project("PRJ-006", "IB Mathematics Resources Hub", "IB Programme",
             "Centralized repository of IB Mathematics resources, past papers, and practice materials",
             "Design", 30.0, 150.0, 45.0, "2025-03-10", "2026-01-15", "Medium", "Green"),
    _project("PRJ-007", "Institutional Learning Management", "Whole School",
             "Enterprise-wide LMS integrating all educational technology systems",
             "Planning", 20.0, 500.0, 100.0, "2025-03-15", "2026-03-31", "Critical", "Amber"),
    _project("PRJ-008", "Educational Tools Suite", "Faculty Development",
             "Curated suite of educational technology tools for teacher professional development",
             "Planning", 15.0, 120.0, 18.0, "2025-04-01", "2025-12-20", "Low", "Green"),
    _project("PRJ-009", "School News & Communications", "Marketing & Comms",
             "Modern communications platform for school news, events, and community engagement",
             "Development", 60.0, 160.0, 96.0, "2025-02-20", "2025-11-10", "High", "Green"),
]

def init_database(db: Session) -> dict:
    if kv.get_value(db, INIT_FLAG_KEY):
        return {"message": "Database already initialized", "initialized": True}

    for p in INITIAL_PROJECTS:
        kv.upsert_project(db, p["projectCode"], dict(p))
    kv.set_value(db, INIT_FLAG_KEY, True)
    logger.info("Seeded %d projects", len(INITIAL_PROJECTS))
    return {
        "message": f"Database initialized successfully with {len(INITIAL_PROJECTS)} projects",
        "projectCount": len(INITIAL_PROJECTS),
    }
