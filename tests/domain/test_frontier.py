from seocrawl.domain.frontier import Frontier


def test_frontier_is_fifo():
    f = Frontier()
    f.push("https://example.com/1")
    f.push("https://example.com/2")
    f.push("https://example.com/3")
    assert [f.pop(), f.pop(), f.pop()] == [
        "https://example.com/1",
        "https://example.com/2",
        "https://example.com/3",
    ]
    assert not f


def test_seed_is_queued_in_original_form():
    f = Frontier("https://example.com/start#top")
    assert len(f) == 1
    assert f.contains("https://example.com/start")
    assert f.pop() == "https://example.com/start#top"


def test_push_rejects_pending_duplicates_ignoring_fragment():
    f = Frontier()
    assert f.push("https://example.com/a") is True
    assert f.push("https://example.com/a#section") is False
    assert len(f) == 1


def test_url_can_be_queued_again_after_pop():
    f = Frontier()
    f.push("https://example.com/a")
    f.pop()
    assert not f.contains("https://example.com/a")
    assert f.push("https://example.com/a") is True
