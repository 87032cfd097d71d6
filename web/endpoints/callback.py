"""
OAuth callback route.

The issuer puts the tokens in the URL fragment, which browsers never send to
the server. The GET handler therefore serves a relay page that posts the
fragment back to the POST handler and then follows the returned redirect.
"""
import logging

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from settings import CALLBACK_PATH

logger = logging.getLogger(__name__)
router = APIRouter()

RELAY_PAGE = """<!DOCTYPE html>
<html>
    <head><title>Signing in...</title></head>
    <body>
        <p>Completing sign-in...</p>
        <script>
            var fragment = window.location.hash.substring(1);
            window.history.replaceState({}, document.title, window.location.pathname);
            fetch("%(path)s", {
                method: "POST",
                headers: {"Content-Type": "application/json"},
                body: JSON.stringify({fragment: fragment})
            })
                .then(function (r) { return r.json(); })
                .then(function (d) { window.location.replace(d.redirect_to); })
                .catch(function () { window.location.replace("/"); });
        </script>
    </body>
</html>
"""


class CallbackPayload(BaseModel):
    fragment: str = ""


@router.get(CALLBACK_PATH, response_class=HTMLResponse)
async def callback_page():
    """Serve the fragment relay page"""
    return HTMLResponse(RELAY_PAGE % {"path": CALLBACK_PATH})


@router.post(CALLBACK_PATH)
async def complete_callback(payload: CallbackPayload, request: Request):
    """Process the relayed fragment and tell the page where to go next"""
    outcome = request.app.state.context.handle_callback(payload.fragment)
    if not outcome.ok:
        logger.info(f"Login callback failed: {outcome.error.message}")
    return {"ok": outcome.ok, "redirect_to": outcome.redirect_to}
