"""Controllers package for the flame graph viewer.

Main Components:
    InteractionController: Pointer drag, wheel and keyboard navigation

Usage:
    from controllers import InteractionController

    controller = InteractionController(view_state, graph, options)
    controller.view_changed.connect(graph.mark_dirty)
    controller.on_wheel(x=400, delta_x=0, delta_y=-100)
"""

from controllers.interaction_controller import DragAnchor, InteractionController

__all__ = ['DragAnchor', 'InteractionController']
