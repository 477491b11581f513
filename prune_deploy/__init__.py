"""prune_deploy

Core namespace for the production build / pruned deployment pipeline.

Why this exists
---------------
The orchestration code under ``pipeline`` shells out to the package manager
and mutates files in the monorepo. The pieces that define *contracts* live
here instead:

* domain types (the build manifest written next to every artifact)
* IO helpers (how JSON artifacts and package manifests hit the disk)

Keeping them separate lets the CLI and the pipeline steps stay thin
composition code.
"""

from __future__ import annotations
