"""HTTP basic auth for operator routes (pause, resume, stats)."""

import os
import secrets
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

basic_security = HTTPBasic(realm="square-dodger operator")


def operator_credentials():
    """Operator username/password from DODGER_USERNAME / DODGER_PASSWORD, read per request."""
    return (os.environ.get("DODGER_USERNAME", "admin"),
            os.environ.get("DODGER_PASSWORD", "admin123"))


def verify_basic_auth(credentials: HTTPBasicCredentials = Depends(basic_security)):
    username, password = operator_credentials()
    username_ok = secrets.compare_digest(credentials.username.encode(), username.encode())
    password_ok = secrets.compare_digest(credentials.password.encode(), password.encode())
    if not (username_ok and password_ok):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid operator credentials",
            headers={"WWW-Authenticate": 'Basic realm="square-dodger operator"'},
        )
    return credentials.username
