"""
Activity categories used by vault items.

Every activity type stored in the database goes through
``validate_activity_type`` first, so free text from users or from the
vision model always ends up as one of VALID_ACTIVITY_TYPES.
"""
from typing import Optional

VALID_ACTIVITY_TYPES = (
    "Sightseeing",
    "Culture",
    "Adventure",
    "Wellness",
    "Entertainment",
    "Shopping",
    "Events",
    "Transportation",
    "Accommodations",
    "Food & Drink",
    "Other",
)

DEFAULT_ACTIVITY_TYPE = "Other"

# Scanned in order, first substring hit wins
KEYWORD_TYPES = (
    ("museum", "Culture"),
    ("gallery", "Culture"),
    ("historical", "Culture"),
    ("landmark", "Sightseeing"),
    ("viewpoint", "Sightseeing"),
    ("scenic", "Sightseeing"),
    ("restaurant", "Food & Drink"),
    ("cafe", "Food & Drink"),
    ("bar", "Food & Drink"),
    ("hotel", "Accommodations"),
    ("accommodation", "Accommodations"),
    ("transport", "Transportation"),
    ("flight", "Transportation"),
    ("train", "Transportation"),
    ("shopping", "Shopping"),
    ("retail", "Shopping"),
    ("market", "Shopping"),
    ("entertainment", "Entertainment"),
    ("show", "Entertainment"),
    ("concert", "Entertainment"),
    ("adventure", "Adventure"),
    ("outdoor", "Adventure"),
    ("sport", "Adventure"),
    ("wellness", "Wellness"),
    ("spa", "Wellness"),
    ("fitness", "Wellness"),
    ("event", "Events"),
    ("festival", "Events"),
    ("activity", "Other"),
)

# badge = background + text classes, hex = calendar fill, border = vault outline
ACTIVITY_TYPE_STYLES = {
    "Sightseeing": {"badge": "bg-amber-100 text-amber-700", "hex": "#F59E0B", "border": "border-amber-500"},
    "Culture": {"badge": "bg-indigo-100 text-indigo-700", "hex": "#6366F1", "border": "border-indigo-500"},
    "Adventure": {"badge": "bg-emerald-100 text-emerald-700", "hex": "#10B981", "border": "border-emerald-500"},
    "Wellness": {"badge": "bg-rose-100 text-rose-700", "hex": "#F43F5E", "border": "border-rose-500"},
    "Entertainment": {"badge": "bg-teal-100 text-teal-700", "hex": "#14B8A6", "border": "border-teal-500"},
    "Shopping": {"badge": "bg-lime-100 text-lime-700", "hex": "#84CC16", "border": "border-lime-500"},
    "Events": {"badge": "bg-fuchsia-100 text-fuchsia-700", "hex": "#D946EF", "border": "border-fuchsia-500"},
    "Transportation": {"badge": "bg-sky-100 text-sky-700", "hex": "#0EA5E9", "border": "border-sky-500"},
    "Accommodations": {"badge": "bg-red-100 text-red-700", "hex": "#EF4444", "border": "border-red-500"},
    "Food & Drink": {"badge": "bg-violet-100 text-violet-700", "hex": "#8B5CF6", "border": "border-violet-500"},
    "Other": {"badge": "bg-slate-100 text-slate-700", "hex": "#64748B", "border": "border-slate-500"},
}


def validate_activity_type(activity_type: Optional[str]) -> str:
    """
    Normalize a free-text label to one of VALID_ACTIVITY_TYPES.

    Exact canonical names are returned unchanged; otherwise the lower-cased
    label is matched against KEYWORD_TYPES; anything else is "Other".
    """
    if not activity_type:
        return DEFAULT_ACTIVITY_TYPE

    normalized = activity_type.strip()
    if normalized in VALID_ACTIVITY_TYPES:
        return normalized

    lower_type = normalized.lower()
    for keyword, category in KEYWORD_TYPES:
        if keyword in lower_type:
            return category

    return DEFAULT_ACTIVITY_TYPE


def get_activity_type_style(activity_type: Optional[str]) -> dict:
    return ACTIVITY_TYPE_STYLES.get(activity_type, ACTIVITY_TYPE_STYLES[DEFAULT_ACTIVITY_TYPE])


def list_activity_types() -> list[dict]:
    return [{"name": name, **ACTIVITY_TYPE_STYLES[name]} for name in VALID_ACTIVITY_TYPES]
