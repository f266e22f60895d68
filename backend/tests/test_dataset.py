import pytest

from backend.app.core.errors import ValidationError
from backend.app.scripts.load_dataset import main as load_cli
from backend.app.services.dataset_loader import load_dataset
from backend.app.services.email_service import list_emails, process_email

CSV = (
    "Sender,Subject,Body,sent_date\n"
    "joe@startup.io,Help required with account verification,The verification email never arrived.,2025-08-19T20:58:00.000Z\n"
    "bob@customer.com,Missing body,,2025-08-19T21:00:00.000Z\n"
    "diana@client.co,Query about product pricing,What does the team plan cost?,\n"
)


@pytest.fixture
def csv_path(tmp_path):
    path = tmp_path / "emails.csv"
    path.write_text(CSV, encoding="utf-8")
    return path


def test_load_dataset_skips_incomplete_rows(store, csv_path):
    summary = load_dataset(store, str(csv_path))
    assert summary["loaded"] == 2
    assert summary["errors"] == 1
    senders = sorted(e.sender for e in list_emails(store))
    assert senders == ["diana@client.co", "joe@startup.io"]


def test_load_dataset_wipes_existing(store, csv_path):
    process_email({"sender": "old@x.io", "subject": "Old", "body": "old"}, store)
    summary = load_dataset(store, str(csv_path))
    assert summary["removed"] == 1
    assert all(e.sender != "old@x.io" for e in list_emails(store))


def test_load_dataset_append(store, csv_path):
    process_email({"sender": "old@x.io", "subject": "Old", "body": "old"}, store)
    load_dataset(store, str(csv_path), wipe=False)
    assert len(list_emails(store)) == 3


def test_missing_file(store, tmp_path):
    with pytest.raises(FileNotFoundError):
        load_dataset(store, str(tmp_path / "nope.csv"))


def test_cli(csv_path):
    summary = load_cli(["-p", str(csv_path)])
    assert summary["loaded"] == 2


def test_cli_missing_file(tmp_path):
    with pytest.raises(SystemExit):
        load_cli(["-p", str(tmp_path / "nope.csv")])


def test_unreadable_file_leaves_store_untouched(store, tmp_path):
    process_email({"sender": "old@x.io", "subject": "Old", "body": "old"}, store)
    broken = tmp_path / "broken.csv"
    broken.write_bytes(b"sender,subject,body\n\xff\xfe\xfa,\xc3\x28,\x80\n")
    with pytest.raises(ValidationError):
        load_dataset(store, str(broken))
    assert [e.sender for e in list_emails(store)] == ["old@x.io"]


def test_directory_is_not_a_dataset(store, tmp_path):
    process_email({"sender": "old@x.io", "subject": "Old", "body": "old"}, store)
    with pytest.raises(FileNotFoundError):
        load_dataset(store, str(tmp_path))
    assert len(list_emails(store)) == 1


def test_cli_unreadable_file(tmp_path):
    broken = tmp_path / "broken.csv"
    broken.write_bytes(b"sender,subject,body\n\xff\xfe\xfa,\xc3\x28,\x80\n")
    with pytest.raises(SystemExit):
        load_cli(["-p", str(broken), "--log-level", "warning"])
