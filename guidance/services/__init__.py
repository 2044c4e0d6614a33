from .admission_api import AdmissionApiClient, AdmissionApiError, get_admission_client, unwrap_list

__all__ = ["AdmissionApiClient", "AdmissionApiError", "get_admission_client", "unwrap_list"]
