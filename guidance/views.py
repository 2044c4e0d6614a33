from django.http import JsonResponse

from .services.admission_api import AdmissionApiError, get_admission_client


def healthz_view(_request):
    try:
        get_admission_client().ping()
    except AdmissionApiError as exc:
        return JsonResponse(
            {
                "status": "error",
                "services": {
                    "admission_api": {"status": "error", "error": exc.message},
                },
            },
            status=503,
        )

    return JsonResponse(
        {
            "status": "ok",
            "services": {
                "admission_api": {"status": "ok"},
            },
        }
    )
