from celery import shared_task

from pyrol.payroll.services import calculate_payroll


@shared_task(name="payroll.calculate_period")
def calculate_period_task(period_id: int, employee_ids: list[int] | None = None) -> dict:
    """Celery task wrapper to (re)calculate a payroll period."""
    result = calculate_payroll(period_id, employee_ids)
    summary = result["summary"]
    return {
        "period_id": period_id,
        "total_employees": summary["total_employees"],
        "total_earnings": str(summary["total_earnings"]),
        "total_deductions": str(summary["total_deductions"]),
        "total_net_pay": str(summary["total_net_pay"]),
    }
