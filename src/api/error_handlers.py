from datetime import datetime

from flask_smorest import Api

from config import setup_logger

logger = setup_logger(name="ErrorHandler")


class NepseApi(Api):
    """Api that renders every HTTP error as the ``{"success": false, "error": {...}}`` envelope"""

    def handle_http_exception(self, error):
        headers = {}
        error_body = {
            "code": error.code,
            "status": error.name,
            "message": error.description,
            "timestamp": datetime.now().isoformat(),
        }

        data = getattr(error, "data", None)
        if data:
            if "message" in data:
                error_body["message"] = data["message"]
            if "messages" in data:
                error_body["errors"] = data["messages"]
                error_body["message"] = "Invalid request parameters"
            headers = data.get("headers") or {}

        if error.code >= 500:
            original = getattr(error, "original_exception", None)
            if original is not None:
                logger.error(f"Unhandled error: {original}", exc_info=original)
                error_body["message"] = "Internal server error"
            else:
                logger.error(f"{error.code} {error.name}: {error_body['message']}")

        return {"success": False, "error": error_body}, error.code, headers
