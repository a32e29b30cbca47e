from .audit_logger import audit_log
from .auth import generate_token, decode_token, token_required
from .validators import validate_registration, validate_profile_update, parse_sensitivity
