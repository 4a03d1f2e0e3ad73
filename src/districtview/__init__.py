"""districtview — core of the interactive 3D district map viewer.

Subpackages:
    layers      District / layer-kind data model, layer registry, styling
    scene       In-memory scene graph, bounding boxes, geometry loading
    world       Asynchronous world assembly (load coordinator, assembler, grid)
    simulation  Scanner event engine, spatial sampling, camera choreography
    comms       EventBus used to notify external collaborators
"""

from districtview.viewer import DistrictViewer, ViewerConfig

__all__ = ["DistrictViewer", "ViewerConfig"]
