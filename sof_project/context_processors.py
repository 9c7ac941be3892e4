from django.conf import settings


def app_name(request):
    """
    Makes the application name and support address available in all templates
    as {{ app_name }} and {{ support_email }}.
    """
    return {
        "app_name": getattr(settings, "APP_NAME", "Strength of Faculty"),
        "support_email": getattr(settings, "APP_SUPPORT_EMAIL", ""),
    }


def genai_status(request):
    """
    Makes {{ genai_enabled }} available so templates can hide the AI matching
    entry points when no API key is configured.
    """
    genai_cfg = getattr(settings, "GENAI", None) or {}
    return {"genai_enabled": bool(genai_cfg.get("API_KEY"))}
