"""
Useful validation methods
"""
import re
from datetime import datetime, timezone

from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _

# "-1", "-1,1050", "-1,1050,1062", ...
_NODE_PATH_RE = re.compile(r"^-1(,\d+)*$")


def validate_utc_datetime(dt: datetime):
    if dt.tzinfo != timezone.utc:
        raise ValidationError(
            _("The timezone for %(datetime)s is not UTC."),
            params={"datetime": dt},
        )


def validate_node_path(path: str):
    """
    A node path is the comma separated chain of ancestor ids, rooted at -1.
    """
    if not _NODE_PATH_RE.match(path):
        raise ValidationError(
            _("%(path)s is not a valid node path."),
            params={"path": path},
        )
