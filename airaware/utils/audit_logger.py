"""
Structured audit logging.
Records account, location and threshold changes with timestamp, user and client.
"""
import os
import logging
import structlog
from datetime import datetime, timezone
from flask import request, g, has_request_context


def setup_audit_logging(app):
    """Configure structlog JSON output to the audit log file."""

    log_file = app.config.get('AUDIT_LOG_FILE') or os.getenv('AUDIT_LOG_FILE', 'logs/audit.log')
    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    audit_logger = logging.getLogger('audit')
    audit_logger.setLevel(logging.INFO)

    # create_app may run several times per process (tests); one handler per file
    target = os.path.abspath(log_file)
    if not any(getattr(h, 'baseFilename', None) == target for h in audit_logger.handlers):
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(logging.Formatter('%(message)s'))
        audit_logger.addHandler(file_handler)

    app.config['AUDIT_LOGGER'] = structlog.get_logger('audit')


def get_audit_logger():
    from flask import current_app
    return current_app.config.get('AUDIT_LOGGER', structlog.get_logger('audit'))


def audit_log(action: str, resource_type: str, resource_id: str = None,
              details: dict = None, user_id: str = None):
    """
    Log an audit event.

    Args:
        action: The action performed (REGISTER, LOGIN, UPDATE, DELETE, ...)
        resource_type: Type of resource touched (user, location, threshold, ...)
        resource_id: ID of the specific resource (optional)
        details: Additional details about the action (optional)
        user_id: Acting user (optional, uses g.user_id if not provided)
    """
    logger = get_audit_logger()

    if user_id is None:
        user_id = getattr(g, 'user_id', 'anonymous')

    if has_request_context():
        client_ip = request.remote_addr or 'unknown'
        user_agent = request.headers.get('User-Agent', 'unknown')
    else:
        client_ip = 'unknown'
        user_agent = 'unknown'

    logger.info(
        "audit_event",
        timestamp=datetime.now(timezone.utc).isoformat(),
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        user_id=str(user_id),
        client_ip=client_ip,
        user_agent=user_agent,
        details=details or {},
    )
