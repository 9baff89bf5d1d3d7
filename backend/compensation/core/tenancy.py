from uuid import UUID

from fastapi import HTTPException, Request

from compensation.models.shared import DEFAULT_COMPANY_ID


def get_current_company(request: Request) -> UUID:
    """Resolve the tenant from the ``X-Company-Id`` header.

    Requests without the header are scoped to the default company.
    """
    company_id_header = request.headers.get("X-Company-Id")
    if not company_id_header:
        return DEFAULT_COMPANY_ID

    try:
        return UUID(company_id_header)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid X-Company-Id header") from None
