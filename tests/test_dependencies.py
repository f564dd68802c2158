import pytest
from starlette.requests import Request

from ppr_relay.core.exceptions import MalformedBodyError, PayloadTooLargeError
from ppr_relay.dependencies import read_submission


def make_request(chunks, content_type="application/json"):
    """Build a request whose body arrives in ``chunks``, with no Content-Length."""
    delivered = []

    async def receive():
        chunk = chunks[len(delivered)]
        delivered.append(chunk)
        return {"type": "http.request", "body": chunk, "more_body": len(delivered) < len(chunks)}

    scope = {
        "type": "http",
        "method": "POST",
        "path": "/send-ppr-form",
        "query_string": b"",
        "headers": [(b"content-type", content_type.encode())],
    }
    return Request(scope, receive), delivered


@pytest.mark.asyncio
async def test_chunked_body_stops_reading_past_limit():
    chunks = [b'{"Notes": "'] + [b"x" * 1024] * 10 + [b'"}']
    request, delivered = make_request(chunks)

    with pytest.raises(PayloadTooLargeError):
        await read_submission(request, max_bytes=2048)

    # 11 + 1024 + 1024 bytes passes 2048; nothing after that is read
    assert len(delivered) == 3


@pytest.mark.asyncio
async def test_chunked_json_within_limit():
    request, _ = make_request([b'{"Pilot First Name": ', b'"Jane", "Services": ["Fuel", "Hangar"]}'])

    submission = await read_submission(request, max_bytes=2048)

    assert submission == {"Pilot First Name": "Jane", "Services": ["Fuel", "Hangar"]}


@pytest.mark.asyncio
async def test_json_scalars_become_text():
    request, _ = make_request([b'{"Passengers": 2, "Fuel": true, "Notes": null}'])

    submission = await read_submission(request, max_bytes=2048)

    assert submission == {"Passengers": "2", "Fuel": "true", "Notes": ""}


@pytest.mark.asyncio
async def test_malformed_json():
    request, _ = make_request([b'{"Pilot First Name": '])

    with pytest.raises(MalformedBodyError):
        await read_submission(request, max_bytes=2048)


@pytest.mark.asyncio
async def test_urlencoded_repeated_keys_become_lists():
    request, _ = make_request(
        [b"Pilot+First+Name=Jane&Services=Fuel&Services=Hangar&Notes="],
        content_type="application/x-www-form-urlencoded",
    )

    submission = await read_submission(request, max_bytes=2048)

    assert submission == {"Pilot First Name": "Jane", "Services": ["Fuel", "Hangar"], "Notes": ""}
    assert list(submission) == ["Pilot First Name", "Services", "Notes"]


@pytest.mark.asyncio
async def test_urlencoded_body_over_limit():
    request, delivered = make_request(
        [b"Notes=" + b"x" * 1024, b"x" * 1024, b"x" * 1024],
        content_type="application/x-www-form-urlencoded",
    )

    with pytest.raises(PayloadTooLargeError):
        await read_submission(request, max_bytes=1500)

    assert len(delivered) == 2
