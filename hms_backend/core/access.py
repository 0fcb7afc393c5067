"""Authorization table: which role may invoke which workflow.

Every request is checked once against ``ROLE_WORKFLOWS`` (see
``core.permissions.WorkflowPermission``). Role names are matched
case-insensitively after trimming. A role that is not in the table keeps its
stored name but permits nothing.
"""

from __future__ import annotations

# Patients & records
VIEW_PATIENTS = 'view_patients'
REGISTER_PATIENT = 'register_patient'
UPDATE_PATIENT = 'update_patient'
DELETE_PATIENT = 'delete_patient'
VIEW_RECORDS = 'view_records'
RECORD_CONSULTATION = 'record_consultation'

# Appointments
VIEW_APPOINTMENTS = 'view_appointments'
SCHEDULE_APPOINTMENT = 'schedule_appointment'

# Billing
VIEW_BILLING = 'view_billing'
CREATE_BILL = 'create_bill'
SETTLE_BILL = 'settle_bill'

# Pharmacy
VIEW_INVENTORY = 'view_inventory'
ADD_INVENTORY_STOCK = 'add_inventory_stock'
VIEW_PRESCRIPTIONS = 'view_prescriptions'
DISPENSE_MEDICATION = 'dispense_medication'

# Administration
VIEW_AUDIT_LOGS = 'view_audit_logs'
VIEW_REPORTS = 'view_reports'
REGISTER_USER = 'register_user'

ALL_WORKFLOWS = frozenset({
    VIEW_PATIENTS,
    REGISTER_PATIENT,
    UPDATE_PATIENT,
    DELETE_PATIENT,
    VIEW_RECORDS,
    RECORD_CONSULTATION,
    VIEW_APPOINTMENTS,
    SCHEDULE_APPOINTMENT,
    VIEW_BILLING,
    CREATE_BILL,
    SETTLE_BILL,
    VIEW_INVENTORY,
    ADD_INVENTORY_STOCK,
    VIEW_PRESCRIPTIONS,
    DISPENSE_MEDICATION,
    VIEW_AUDIT_LOGS,
    VIEW_REPORTS,
    REGISTER_USER,
})

ROLE_WORKFLOWS: dict[str, frozenset[str]] = {
    'admin': ALL_WORKFLOWS,
    'receptionist': frozenset({
        VIEW_PATIENTS,
        REGISTER_PATIENT,
        UPDATE_PATIENT,
        VIEW_RECORDS,
        VIEW_APPOINTMENTS,
        SCHEDULE_APPOINTMENT,
        VIEW_BILLING,
        CREATE_BILL,
        SETTLE_BILL,
        VIEW_REPORTS,
    }),
    'doctor': frozenset({
        VIEW_PATIENTS,
        VIEW_RECORDS,
        RECORD_CONSULTATION,
        VIEW_APPOINTMENTS,
        VIEW_PRESCRIPTIONS,
    }),
    'pharmacist': frozenset({
        VIEW_INVENTORY,
        ADD_INVENTORY_STOCK,
        VIEW_PRESCRIPTIONS,
        DISPENSE_MEDICATION,
    }),
}


def normalize_role(role: str | None) -> str:
    return (role or '').strip().lower()


def permitted_workflows(role: str | None) -> frozenset[str]:
    """Workflows the role may invoke; empty for unknown roles."""
    return ROLE_WORKFLOWS.get(normalize_role(role), frozenset())


def is_permitted(role: str | None, workflow: str) -> bool:
    return workflow in permitted_workflows(role)
