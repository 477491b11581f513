"""pipeline.steps

One module per pipeline stage. Each step takes the resolved
:class:`~pipeline.models.BuildConfig` (and a runner where it launches
processes) and either returns plain values or raises
:class:`~pipeline.models.BuildError`.
"""

from __future__ import annotations
