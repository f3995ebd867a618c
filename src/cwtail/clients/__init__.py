"""Service clients for cwtail."""

from cwtail.clients.aws import AWSClientFactory, handle_aws_error

__all__ = ["AWSClientFactory", "handle_aws_error"]
