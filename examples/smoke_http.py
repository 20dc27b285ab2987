from __future__ import annotations

import json
import os
import time
import urllib.error
import urllib.request


def _wait_http_ok(url: str, timeout_seconds: float = 40.0) -> bytes:
    deadline = time.time() + timeout_seconds
    last_error: Exception | None = None
    while time.time() < deadline:
        try:
            with urllib.request.urlopen(url, timeout=3.0) as response:  # noqa: S310
                if response.status == 200:
                    return response.read()
        except Exception as exc:  # noqa: BLE001
            last_error = exc
        time.sleep(0.5)
    raise RuntimeError(f"timed out waiting for HTTP 200 at {url}: {last_error}")


def _post_json(url: str, payload: dict[str, str]) -> tuple[int, dict[str, object]]:
    request = urllib.request.Request(
        url,
        data=json.dumps(payload).encode("utf-8"),
        headers={"Content-Type": "application/json"},
        method="POST",
    )
    try:
        with urllib.request.urlopen(request, timeout=60.0) as response:  # noqa: S310
            return response.status, json.loads(response.read().decode("utf-8"))
    except urllib.error.HTTPError as exc:
        return exc.code, json.loads(exc.read().decode("utf-8"))


def _assert_health(api_base: str) -> None:
    health_payload = json.loads(_wait_http_ok(f"{api_base}/healthz").decode("utf-8"))
    ready_payload = json.loads(_wait_http_ok(f"{api_base}/readyz").decode("utf-8"))
    assert health_payload.get("status") == "ok", health_payload
    assert ready_payload.get("status") == "ready", ready_payload


def _assert_rejects_incomplete_request(api_base: str) -> None:
    status, body = _post_json(f"{api_base}/v1/convert", {"sourceBlobPath": "in/a.mp3"})
    assert status == 400, (status, body)
    assert "targetBlobPath" in str(body.get("detail", "")), body


def _assert_convert(api_base: str, source: str, target: str) -> None:
    status, body = _post_json(
        f"{api_base}/v1/convert",
        {"sourceBlobPath": source, "targetBlobPath": target},
    )
    assert status == 200, (status, body)
    assert body.get("destination") == target, body
    assert int(str(body.get("output_size_bytes", 0))) > 44, body


def main() -> None:
    api_base = os.getenv("CONVERTER_API_BASE", "http://converter-http:8090")
    source = os.getenv("CONVERTER_SMOKE_SOURCE")
    target = os.getenv("CONVERTER_SMOKE_TARGET", "smoke/out.wav")

    _assert_health(api_base)
    _assert_rejects_incomplete_request(api_base)
    if source:
        _assert_convert(api_base, source, target)

    print("converter HTTP smoke checks passed")


if __name__ == "__main__":
    main()
