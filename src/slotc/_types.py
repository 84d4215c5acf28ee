"""Shared type definitions for slotc."""

from typing import Literal, TypeAlias

# Mode of operation
SlotcMode: TypeAlias = Literal["build", "watch"]

# Slot name as declared by the layout's slot attribute
SlotName: TypeAlias = str

# Merge mode string: "html", "text" or "attr:<name>"
MergeMode: TypeAlias = str

# Classification tag attached to every reported anomaly
DiagnosticLevel: TypeAlias = Literal["error", "warning", "auto-add", "normalized"]

# Where a provider element currently lives in its page
Placement: TypeAlias = Literal["head", "body", "other"]
