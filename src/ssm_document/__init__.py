"""
ssm-document - deploy AWS Systems Manager documents from local config files.

Subpackages:
- ssm_document.core: errors, logging, settings, .env loading
- ssm_document.documents: descriptors, content resolution, diffs, config loading
- ssm_document.registry: registry protocol and the boto3 SSM implementation
- ssm_document.execution: reconciliation and chunked batch scheduling
- ssm_document.cli: the ``ssm-document`` command
"""

__version__ = "0.4.0"
