from districtview.comms.event_bus import EventBus

__all__ = ["EventBus"]
