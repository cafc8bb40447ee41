"""
Yoga pose catalog
Static data for the poses the scoring API knows how to grade
"""

from typing import Dict, List, Optional

YOGA_POSES: Dict[str, dict] = {
    "chair": {
        "id": "chair",
        "name": "chair",
        "full_name": "Utkatasana (Chair Pose)",
        "description": "Strengthens thighs and ankles while stimulating the heart and diaphragm.",
        "difficulty": "Intermediate",
        "duration": "30-60 seconds",
        "image": "/pose-Images/chair.jpg",
        "instructions": [
            "Stand with feet together and arms at your sides.",
            "Inhale and raise your arms overhead, palms facing inward.",
            "Exhale and bend your knees, lowering your hips as if sitting in a chair.",
            "Keep your back straight and chest lifted.",
            "Hold for 30-60 seconds.",
        ],
    },
    "cobra": {
        "id": "cobra",
        "name": "cobra",
        "full_name": "Bhujangasana (Cobra Pose)",
        "description": "A gentle backbend that strengthens the spine and opens the chest.",
        "difficulty": "Intermediate",
        "duration": "15-30 seconds",
        "image": "/pose-Images/cobra.jpg",
        "instructions": [
            "Lie on your stomach with legs extended and tops of feet on the floor.",
            "Place palms under shoulders, elbows close to body.",
            "Inhale and lift your chest, using back muscles not your arms.",
            "Keep elbows slightly bent and shoulders relaxed.",
            "Hold for 15-30 seconds.",
        ],
    },
    "dog": {
        "id": "dog",
        "name": "dog",
        "full_name": "Adho Mukha Svanasana (Downward Dog)",
        "description": "Stretches the body and strengthens arms and legs; relieves stress.",
        "difficulty": "Beginner",
        "duration": "1-3 minutes",
        "image": "/pose-Images/dog.jpg",
        "instructions": [
            "Start on hands and knees, hands shoulder-width apart.",
            "Tuck toes and lift hips toward the ceiling.",
            "Straighten legs and form an inverted V-shape.",
            "Press heels toward the floor and relax your neck.",
            "Hold for 1-3 minutes.",
        ],
    },
    "shoulderstand": {
        "id": "shoulderstand",
        "name": "shoulderstand",
        "full_name": "Sarvangasana (Shoulder Stand)",
        "description": "An advanced inversion pose that improves circulation and boosts energy.",
        "difficulty": "Advanced",
        "duration": "1-3 minutes",
        "image": "/pose-Images/shoulderstand.jpg",
        "instructions": [
            "Lie on your back and lift legs to 90 degrees.",
            "Use hands to support lower back while lifting hips.",
            "Straighten legs and stack them over your shoulders.",
            "Keep neck relaxed and chin slightly tucked.",
            "Hold for 1-3 minutes.",
        ],
    },
    "tree": {
        "id": "tree",
        "name": "tree",
        "full_name": "Vrikshasana (Tree Pose)",
        "description": "Enhances balance, stability, and concentration while strengthening the legs.",
        "difficulty": "Beginner",
        "duration": "30-60 seconds",
        "image": "/pose-Images/tree.jpg",
        "instructions": [
            "Stand tall with feet together.",
            "Shift weight to one foot.",
            "Place the opposite foot on the inner thigh or calf (not knee).",
            "Bring palms together in prayer position at chest.",
            "Hold for 30-60 seconds, then switch sides.",
        ],
    },
    "triangle": {
        "id": "triangle",
        "name": "triangle",
        "full_name": "Trikonasana (Triangle Pose)",
        "description": "Stretches the spine and legs; improves flexibility and digestion.",
        "difficulty": "Intermediate",
        "duration": "30-60 seconds",
        "image": "/pose-Images/triangle.jpg",
        "instructions": [
            "Stand with feet wide apart, arms stretched out to sides.",
            "Turn one foot out 90°, other foot slightly in.",
            "Extend arm over the front leg and lower it to shin, ankle, or floor.",
            "Reach the opposite arm straight up, look at the raised hand.",
            "Hold for 30-60 seconds, then switch sides.",
        ],
    },
    "warrior": {
        "id": "warrior",
        "name": "warrior",
        "full_name": "Virabhadrasana (Warrior Pose)",
        "description": "A powerful standing pose that builds strength and endurance.",
        "difficulty": "Intermediate",
        "duration": "30-60 seconds",
        "image": "/pose-Images/warrior.jpg",
        "instructions": [
            "Stand with feet wide apart.",
            "Turn front foot out 90° and back foot slightly in.",
            "Bend front knee over ankle, keeping back leg straight.",
            "Extend arms parallel to the floor, gaze forward.",
            "Hold for 30-60 seconds, then switch sides.",
        ],
    },
}

SCORE_EXCELLENT = 90
SCORE_GOOD = 75


def get_pose(pose_id: str) -> Optional[dict]:
    """Looks a pose up by id, case-insensitive."""
    return YOGA_POSES.get((pose_id or "").strip().lower())


def list_poses() -> List[dict]:
    return list(YOGA_POSES.values())


def score_band(score: float) -> str:
    if score >= SCORE_EXCELLENT:
        return "excellent"
    if score >= SCORE_GOOD:
        return "good"
    return "needs_work"


# How firmly corrections are worded for each score band
BAND_SEVERITY = {
    "excellent": "low",
    "good": "medium",
    "needs_work": "high",
}


def correction_severity(score: float) -> str:
    return BAND_SEVERITY[score_band(score)]
