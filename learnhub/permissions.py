from functools import wraps

from flask import abort
from flask_login import current_user


def teacher_required(view):
    """Allow only logged-in teachers; everyone else gets 403."""
    @wraps(view)
    def wrapped(*args, **kwargs):
        if not current_user.is_authenticated or not current_user.is_teacher:
            abort(403, description='Forbidden')
        return view(*args, **kwargs)
    return wrapped
