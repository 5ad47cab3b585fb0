"""GREENSIDE — draw-mode state machine and feature commit pipeline for a
golf-course map editor.

The core owns the editor's transient state (draw flags, pending properties,
edit sessions) and the rules for merging drawn features into the stored
GeoJSON FeatureCollection.  Rendering, the drawing toolkit and the device
GPS are collaborators reached through small interfaces.
"""

from greenside.editor import MapEditor

__all__ = ["MapEditor"]
