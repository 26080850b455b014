from .service import ELEMENT_PROPERTIES, InspectService, describe_element, read_property

__all__ = ["ELEMENT_PROPERTIES", "InspectService", "describe_element", "read_property"]
