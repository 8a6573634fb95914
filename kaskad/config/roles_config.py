"""
Roles and Enumerations Configuration
Closed value sets shared by the request schemas, the access policies and the
seed script. Keep in sync with the CHECK constraints in database/schema.sql.
"""

# Profile roles, in descending order of privilege
ROLES = ["superadmin", "admin", "teacher", "parent", "child"]
DEFAULT_ROLE = "child"

# Roles that may read the studio they belong to
STUDIO_MEMBER_ROLES = ["admin", "teacher", "parent", "child"]

# Roles that may create, edit and delete gallery items of their own studio
GALLERY_MANAGER_ROLES = ["admin", "teacher"]

MEDIA_TYPES = ["photo", "video"]

SUBSCRIPTION_PLANS = {
    "free": "Free tier",
    "basic": "Basic subscription",
    "premium": "Premium subscription",
}
DEFAULT_SUBSCRIPTION_PLAN = "free"

# Studios created on first deploy
SEED_STUDIOS = [
    {
        "id": "123e4567-e89b-12d3-a456-426614174000",
        "name": "Kaskad",
        "description": "Танцевальная студия Kaskad",
        "subscription_plan": "premium",
        "active": True,
    },
]


def get_role_matrix():
    """
    Returns what each role can do, for the frontend and for documentation.
    Format: {
        "admin": {"studio": ["select"], "gallery": ["select", "insert", "update", "delete"], ...},
        ...
    }
    The superadmin entry reflects the is_superadmin flag rather than the role value.
    """
    matrix = {}
    for role in ROLES:
        studio_actions = []
        gallery_actions = ["select"]
        if role == "superadmin":
            studio_actions = ["select", "insert", "update", "delete"]
        elif role in STUDIO_MEMBER_ROLES:
            studio_actions = ["select"]
        if role in GALLERY_MANAGER_ROLES:
            gallery_actions = ["select", "insert", "update", "delete"]
        matrix[role] = {
            "studio": studio_actions,
            "profile": ["select", "insert:self", "update:self"],
            "gallery": gallery_actions,
        }
    return matrix


ROLE_MATRIX = get_role_matrix()
