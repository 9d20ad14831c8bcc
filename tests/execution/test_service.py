"""End-to-end tests for the deploy/remove entry points."""

import pytest

from ssm_document.core.errors import BatchFailedError
from ssm_document.core.logging import configure_logging
from ssm_document.documents.loader import load_documents
from ssm_document.execution.results import DocumentAction, Operation
from ssm_document.execution.service import deploy_documents, remove_documents


def _no_sleep(seconds):
    return None


class TestDeployDocuments:
    def test_deploys_loaded_tree(self, fake_registry, documents_tree):
        documents = load_documents([str(documents_tree)])
        lines = []

        result = deploy_documents(fake_registry, documents, reporter=lines.append, sleep=_no_sleep)

        assert result.operation == Operation.DEPLOY
        assert {o.action for o in result.outcomes} == {DocumentAction.CREATED}
        assert set(fake_registry.documents) == {"demo", "inline-doc"}
        assert fake_registry.documents["demo"].shared_with == ["111", "222"]
        assert "[demo] Deploy completed!" in lines

    def test_second_deploy_is_unchanged(self, fake_registry, documents_tree):
        documents = load_documents([str(documents_tree)])
        deploy_documents(fake_registry, documents, sleep=_no_sleep)

        result = deploy_documents(fake_registry, documents, sleep=_no_sleep)

        assert {o.action for o in result.outcomes} == {DocumentAction.UNCHANGED}

    def test_failures_raise_after_full_batch(self, fake_registry, make_descriptor):
        documents = [make_descriptor(f"doc-{i}") for i in range(5)]
        fake_registry.fail_on("create_document", document="doc-2")

        with pytest.raises(BatchFailedError) as exc_info:
            deploy_documents(fake_registry, documents, parallels=2, sleep=_no_sleep)

        assert str(exc_info.value) == "1 of 5 documents failed deploy"
        assert set(fake_registry.documents) == {"doc-0", "doc-1", "doc-3", "doc-4"}

    @pytest.mark.parametrize("json_format", [True, False])
    def test_deploys_with_logging_configured(self, fake_registry, documents_tree, capsys, json_format):
        configure_logging(level="INFO", json_format=json_format)
        documents = load_documents([str(documents_tree)])

        result = deploy_documents(fake_registry, documents, sleep=_no_sleep)

        assert result.succeeded == 2
        err = capsys.readouterr().err
        assert "batch.start" in err
        assert "reconcile.created" in err


class TestRemoveDocuments:
    def test_two_pass_removal(self, fake_registry, make_descriptor):
        fake_registry.seed("shared", shared_with=["111"])
        fake_registry.seed("private")
        documents = [make_descriptor("shared"), make_descriptor("private"), make_descriptor("absent")]

        first = remove_documents(fake_registry, documents, sleep=_no_sleep)
        actions = {o.name: o.action for o in first.outcomes}
        assert actions == {
            "shared": DocumentAction.UNSHARED,
            "private": DocumentAction.REMOVED,
            "absent": DocumentAction.ABSENT,
        }

        second = remove_documents(fake_registry, documents, sleep=_no_sleep)
        assert {o.name: o.action for o in second.outcomes}["shared"] == DocumentAction.REMOVED
        assert fake_registry.documents == {}

    def test_failure_summary(self, fake_registry, make_descriptor):
        fake_registry.seed("a")
        fake_registry.fail_on("delete_document")
        with pytest.raises(BatchFailedError, match="1 of 1 documents failed remove"):
            remove_documents(fake_registry, [make_descriptor("a")], sleep=_no_sleep)
