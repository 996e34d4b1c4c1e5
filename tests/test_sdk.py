from unittest.mock import MagicMock, patch

from cleaner_sdk import ArtifactCleanerClient


@patch("cleaner_sdk.httpx.post")
def test_sanitize_posts_html(mock_post):
    mock_post.return_value = MagicMock(json=MagicMock(return_value={"html": "<p>x</p>", "changed": True}))
    client = ArtifactCleanerClient(base_url="http://cleaner:9000", timeout_s=5.0)

    assert client.sanitize('<p style="a">x</p>')["html"] == "<p>x</p>"
    mock_post.assert_called_once_with(
        "http://cleaner:9000/api/sanitize", json={"html": '<p style="a">x</p>'}, timeout=5.0
    )


@patch("cleaner_sdk.httpx.post")
def test_clean_only_sends_given_selection(mock_post):
    mock_post.return_value = MagicMock(json=MagicMock(return_value={}))
    client = ArtifactCleanerClient()

    client.clean("<p>x</p>")
    assert mock_post.call_args.kwargs["json"] == {"html": "<p>x</p>"}

    client.clean("<p>x</p>", selection_start=3, selection_end=4)
    assert mock_post.call_args.kwargs["json"] == {"html": "<p>x</p>", "selection_start": 3, "selection_end": 4}
