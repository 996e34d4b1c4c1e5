"""Demo: clean pasted Word HTML through a running Artifact Cleaner server.

Run (with the API server running on localhost:8000):
  python3 examples/sdk_demo.py
"""

from cleaner_sdk import ArtifactCleanerClient

PASTE = (
    '<p class="MsoNormal" style="margin:0cm">&nbsp;</p>'
    '<p class="MsoNormal" lang="EN-US"><span style="mso-bidi-font-family:Arial">Quarterly&nbsp;report</span></p>'
)


def main() -> None:
    client = ArtifactCleanerClient(base_url="http://localhost:8000")

    print("Whole document:")
    result = client.clean(PASTE)
    print(result["summary"])
    print(result["html"])

    selection = '<span style="mso-bidi-font-family:Arial">Quarterly&nbsp;report</span>'
    start = PASTE.index(selection)
    print("\nSelection only:")
    result = client.clean(PASTE, selection_start=start, selection_end=start + len(selection))
    print(result["html"])


if __name__ == "__main__":
    main()
