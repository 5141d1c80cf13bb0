_TAG_RULES = [
    ("/api/v1/auth/jwt/", "JWT Authentication"),
    ("/api/v1/auth/", "Authentication"),
    ("/api/v1/users/", "Users"),
    ("/api/v1/departments/", "Departments"),
    ("/api/v1/schedules/", "Schedules"),
    ("/api/v1/holidays/", "Holidays"),
    ("/api/v1/employees/", "Employees"),
    ("/api/v1/salary-grades/", "Salary Grades"),
    ("/api/v1/attendance/", "Attendance"),
    ("/api/v1/benefits/", "Benefits"),
    ("/api/v1/employee-benefits/", "Benefits"),
    ("/api/v1/payroll/", "Payroll"),
    ("/api/v1/dashboard/", "Dashboard"),
    ("/api/v1/employee-dashboard/", "Dashboard"),
    ("/api/v1/department-head-dashboard/", "Dashboard"),
    ("/api/v1/analytics/", "Dashboard"),
    ("/api/v1/audit/", "Audit"),
    ("/api/v1/schema/", "Meta"),
]


def group_tags(result, generator, request, public):
    """Collapse operation tags to one tag per path prefix (first match wins)."""
    for path, operations in result.get("paths", {}).items():
        tag = next((name for prefix, name in _TAG_RULES if path.startswith(prefix)), None)
        if tag is None:
            continue
        for op in operations.values():
            op["tags"] = [tag]
    return result
