from .appointment_controller import appointment_bp
from .customer_controller import customer_bp
from .employee_controller import employee_bp
from .health_controller import health_bp
from .service_controller import service_bp
from .tally_controller import tally_bp

ALL_BLUEPRINTS = (
    health_bp,
    appointment_bp,
    customer_bp,
    employee_bp,
    service_bp,
    tally_bp,
)

__all__ = [
    "ALL_BLUEPRINTS",
    "appointment_bp",
    "customer_bp",
    "employee_bp",
    "health_bp",
    "service_bp",
    "tally_bp",
]
