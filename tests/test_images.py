from gabonshop.domain.images import (
    LegacySingle,
    Missing,
    StringList,
    StringUrl,
    UrlObjectList,
    classify_images,
    cover_image,
    normalize_images,
    resolve_images,
    safe_image_url,
)


def test_string_list():
    doc = {"images": ["a.jpg", "a2.jpg"]}
    assert isinstance(classify_images(doc), StringList)
    assert resolve_images(doc) == ["a.jpg", "a2.jpg"]
    assert cover_image(doc) == "a.jpg"


def test_url_object_list():
    doc = {"images": [{"url": "b.jpg"}, {"url": "b2.jpg"}]}
    assert isinstance(classify_images(doc), UrlObjectList)
    assert resolve_images(doc) == ["b.jpg", "b2.jpg"]
    assert cover_image(doc) == "b.jpg"


def test_bare_string():
    doc = {"images": "c.jpg"}
    assert isinstance(classify_images(doc), StringUrl)
    assert cover_image(doc) == "c.jpg"


def test_legacy_image_url():
    doc = {"image_url": "d.jpg"}
    assert isinstance(classify_images(doc), LegacySingle)
    assert cover_image(doc) == "d.jpg"


def test_nothing_gives_placeholder():
    assert isinstance(classify_images({}), Missing)
    assert resolve_images({}) == []
    assert cover_image({}) is None


def test_empty_list_falls_back_to_legacy_field():
    assert cover_image({"images": [], "image_url": "d.jpg"}) == "d.jpg"
    assert cover_image({"images": []}) is None


def test_blank_urls_give_placeholder():
    assert isinstance(classify_images({"images": ""}), Missing)
    assert normalize_images({"images": ""}) == []
    assert normalize_images({"images": [""]}) == []
    assert normalize_images({"images": ["", "b.jpg"]}) == ["b.jpg"]
    assert cover_image({"images": [""], "image_url": "d.jpg"}) == "d.jpg"


def test_group_reference_gets_first_file_suffix():
    url = "https://ucarecdn.com/0c3b6a7e-1111-2222-3333-444455556666~3/"
    assert safe_image_url(url) == "https://ucarecdn.com/0c3b6a7e-1111-2222-3333-444455556666~3/nth/0/"
    # without trailing slash
    assert safe_image_url(url.rstrip("/")).endswith("~3/nth/0/")


def test_group_rewrite_is_idempotent():
    url = "https://ucarecdn.com/abc~2/"
    once = safe_image_url(url)
    assert safe_image_url(once) == once
    assert once.count("/nth/") == 1


def test_direct_and_plain_urls_unchanged():
    assert safe_image_url("https://ucarecdn.com/abc~2/nth/1/") == "https://ucarecdn.com/abc~2/nth/1/"
    assert safe_image_url("https://ucarecdn.com/uuid/") == "https://ucarecdn.com/uuid/"
    assert safe_image_url(None) is None
    assert safe_image_url("") is None


def test_cover_of_group_is_rewritten():
    assert cover_image({"images": ["https://ucarecdn.com/g~2"]}) == "https://ucarecdn.com/g~2/nth/0/"
