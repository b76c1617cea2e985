from prharvest.fingerprint import hash_text, suggestion_id, thread_identity


def test_hash_text_matches_known_fnv1a_values() -> None:
    assert hash_text("") == "ztntfp"
    assert hash_text("a") == "1r9wi7g"


def test_hash_text_is_stable_and_content_sensitive() -> None:
    assert hash_text("Cache the length") == hash_text("Cache the length")
    assert hash_text("Cache the length") != hash_text("cache the length")


def test_hash_text_handles_non_bmp_text() -> None:
    value = hash_text("fix 🐛 in parser")
    assert value
    assert value.isalnum()
    assert value == value.lower()


def test_thread_identity_prefers_element_id() -> None:
    assert thread_identity("review-thread-or-comment-id-9", "<turbo-frame>") == "review-thread-or-comment-id-9"


def test_thread_identity_hashes_markup_prefix_when_id_missing() -> None:
    markup = "<turbo-frame>" + "x" * 600
    ident = thread_identity(None, markup, prefix_chars=512)
    assert ident.startswith("frame-")
    assert ident == thread_identity("", markup[:512] + "different tail", prefix_chars=512)


def test_suggestion_id_layout() -> None:
    sid = suggestion_id("thread-1", 2, 3, "Rename foo")
    assert sid == f"thread-1:2:3:{hash_text('Rename foo')}"
    assert sid != suggestion_id("thread-1", 2, 4, "Rename foo")
    assert sid != suggestion_id("thread-1", 2, 3, "Rename bar")
