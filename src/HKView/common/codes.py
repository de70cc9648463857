class EnumClass(object):
    @classmethod
    def toString(classInst, value):
        return classInst.toItem(value, 1)
    @classmethod
    def toItem(classInst, value, loc):
        for data in classInst.descriptions:
            if value == data[0]:
                return data[loc]
        return None
    @classmethod
    def describe(classInst, value):
        name = classInst.toString(value)
        if name is None:
            return f"Unknown ({value})"
        return name

class MaterialType(EnumClass):
    MILD_STEEL = 1
    STAINLESS = 2
    ALUMINIUM = 3
    BRASS = 4
    COPPER = 5
    USER = 9
    descriptions = [
        (MILD_STEEL, "MS (Mild Steel)"),
        (STAINLESS, "STS (Stainless Steel)"),
        (ALUMINIUM, "AL (Aluminum)"),
        (BRASS, "BRASS"),
        (COPPER, "COPPER"),
        (USER, "USER"),
    ]

class AssistGas(EnumClass):
    OXYGEN = 1
    NITROGEN = 2
    AIR = 3
    descriptions = [
        (OXYGEN, "O2 (Oxygen)"),
        (NITROGEN, "N2 (Nitrogen)"),
        (AIR, "AIR"),
    ]

class PiercingType(EnumClass):
    NONE = 0
    NORMAL = 1
    USER = 4
    SHOT_MARKING = 10
    REPEAT = 11
    descriptions = [
        (NONE, "No Piercing"),
        (NORMAL, "Normal Piercing"),
        (USER, "User Defined"),
        (SHOT_MARKING, "Shot Marking"),
        (REPEAT, "Repeat Piercing"),
    ]

class CuttingType(EnumClass):
    NONE = 0
    NORMAL = 1
    PULSE = 2
    MARKING = 10
    REPEAT = 11
    descriptions = [
        (NONE, "None"),
        (NORMAL, "Normal Cutting"),
        (PULSE, "Pulse Cutting"),
        (MARKING, "Marking (Engraving)"),
        (REPEAT, "Repeat Cutting"),
    ]

class PathType(EnumClass):
    PIERCING = 'piercing'
    LEAD_IN = 'leadIn'
    APPROACH = 'approach'
    CUTTING = 'cutting'
    descriptions = [
        (PIERCING, "Piercing"),
        (LEAD_IN, "Lead-in"),
        (APPROACH, "Approach"),
        (CUTTING, "Cutting"),
    ]

# Phase values of the one-argument remnant cut marker
class RemnantPhase(EnumClass):
    CUT = 1
    END = 2
    descriptions = [
        (CUT, "Start cutting"),
        (END, "End of remnant cut"),
    ]
