# academy/api/errors.py
from typing import NoReturn

from fastapi import HTTPException

from academy.services.errors import Rejection


def raise_for_rejection(rejection: Rejection, headers: dict | None = None) -> NoReturn:
    raise HTTPException(
        status_code=rejection.status_code,
        detail=rejection.as_detail(),
        headers=headers,
    )
