"""
Firebase identity token verification
"""

import asyncio
from functools import partial
from typing import Optional

from firebase_admin import App, auth
from loguru import logger

from ..exceptions import UnauthorizedError


class IdentityService:
    """Service for turning a bearer identity token into a user id"""

    def __init__(self, app: Optional[App] = None):
        self.app = app

    async def verify(self, token: str) -> str:
        """Verify an ID token and return the uid it was issued to"""
        try:
            decoded = await asyncio.get_running_loop().run_in_executor(
                None, partial(auth.verify_id_token, token, app=self.app)
            )
        except (auth.InvalidIdTokenError, auth.UserDisabledError, ValueError) as e:
            logger.warning(f"Rejected identity token: {e.__class__.__name__}")
            raise UnauthorizedError(str(e)) from e

        uid = decoded.get("uid")
        if not uid:
            raise UnauthorizedError("token carries no uid")
        return uid
