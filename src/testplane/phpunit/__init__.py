"""PHPUnit target inference."""

from testplane.phpunit.plugin import create_nodes, infer_targets, normalize_options

__all__ = ["create_nodes", "infer_targets", "normalize_options"]
