"""
e2elink - end-to-end test composition for multi-module workspaces

e2elink discovers which modules of a dependency-linked workspace opt into
end-to-end testing, links their test assets into the host module's
workspace, and keeps the generated path aliases, runner manifests and
dependency manifests consistent with that composition.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
