"""Payment validation and sheet music — card checks answer 200, uploads land on disk.

Invariants:
    - validate-payment never errors on a bad card: success=false with a reason
    - Only .pdf/.jpg/.jpeg/.png/.gif uploads are accepted
    - Stored names are server-generated
    - Uploads above max_upload_bytes are refused with 413 and never written
"""

from pathlib import Path

from tests.services.booking_helpers import add_slot, book, future

VISA = "4111 1111 1111 1111"


async def test_expiry_century_pivot(client):
    res = await client.post("/api/v1/student/validate-payment", json={
        "card_number": VISA, "expiry_date": "12/99", "cvv": "123",
    })
    # 99 means 1999, so this card is long expired
    assert res.status_code == 200
    assert res.json()["reason"] == "CARD_EXPIRED"

    res = await client.post("/api/v1/student/validate-payment", json={
        "card_number": VISA, "expiry_date": "12/45", "cvv": "123",
    })
    assert res.json() == {
        "success": True, "message": "Payment details are valid.", "reason": None,
    }


async def test_bad_checksum_reported(client):
    res = await client.post("/api/v1/student/validate-payment", json={
        "card_number": "4111-1111-1111-1112", "expiry_date": "12/45", "cvv": "123",
    })
    assert res.status_code == 200
    body = res.json()
    assert body["success"] is False
    assert body["reason"] == "INVALID_CHECKSUM"


async def test_upload_sheet_music(client, test_settings):
    res = await client.post(
        "/api/v1/student/sheet-music",
        files={"file": ("Moonlight Sonata.PDF", b"%PDF-1.4 score", "application/pdf")},
    )
    assert res.status_code == 201
    file_path = res.json()["file_path"]
    assert file_path.startswith("uploads/sheet-music/")
    assert file_path.endswith(".pdf")
    assert "Moonlight" not in file_path

    stored = Path(test_settings.uploads_dir) / "sheet-music" / Path(file_path).name
    assert stored.read_bytes() == b"%PDF-1.4 score"


async def test_upload_rejects_other_extensions(client):
    res = await client.post(
        "/api/v1/student/sheet-music",
        files={"file": ("notes.exe", b"MZ", "application/octet-stream")},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_FILE_TYPE"


async def test_upload_rejects_empty_file(client):
    res = await client.post(
        "/api/v1/student/sheet-music",
        files={"file": ("empty.pdf", b"", "application/pdf")},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "NO_FILE"


async def test_attach_sheet_music_to_lesson(client, teacher, student):
    lesson = await book(
        client, (await add_slot(client, teacher["id"], future()))["id"], student["id"],
    )
    res = await client.put(
        f"/api/v1/student/lesson/{lesson['id']}/sheet-music",
        params={"student_id": student["id"]},
        json={"sheet_music_path": "uploads/sheet-music/abc.pdf"},
    )
    assert res.status_code == 200
    assert res.json()["lesson"]["sheet_music_path"] == "uploads/sheet-music/abc.pdf"


async def test_book_with_sheet_music_path(client, teacher, student):
    slot = await add_slot(client, teacher["id"], future())
    lesson = await book(
        client, slot["id"], student["id"], sheet_music_path="uploads/sheet-music/x.png",
    )
    assert lesson["sheet_music_path"] == "uploads/sheet-music/x.png"


async def test_upload_over_size_cap_is_refused(client, test_settings):
    test_settings.max_upload_bytes = 1024
    res = await client.post(
        "/api/v1/student/sheet-music",
        files={"file": ("big.pdf", b"x" * 2048, "application/pdf")},
    )
    assert res.status_code == 413
    assert res.json()["error"]["code"] == "FILE_TOO_LARGE"
    assert not (Path(test_settings.uploads_dir) / "sheet-music").exists()


async def test_upload_at_size_cap_is_stored(client, test_settings):
    test_settings.max_upload_bytes = 1024
    res = await client.post(
        "/api/v1/student/sheet-music",
        files={"file": ("exact.png", b"x" * 1024, "image/png")},
    )
    assert res.status_code == 201
