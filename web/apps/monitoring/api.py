from django.http import JsonResponse

from apps.commerce.client import get_woo_client


def health_view(_request):
    # no database; the only hard dependency is a configured commerce backend
    commerce_ok = get_woo_client().configured

    ok = commerce_ok
    code = 200 if ok else 503
    return JsonResponse(
        {"ok": ok, "components": {"commerce": {"ok": commerce_ok}}},
        status=code,
    )
