"""
Core Constants and Enums
Central source of truth for node actions, linked entity kinds and edit outcomes
"""
from enum import Enum


# ============================================================================
# NODE ACTIONS
# ============================================================================

class NodeAction(str, Enum):
    """
    Action performed when a workflow node is reached

    Values are the single-letter codes stored with the node.
    """
    EXTERNAL_PROCESS = "P"
    EXTERNAL_REPORT = "R"
    EXTERNAL_TASK = "T"
    DOCUMENT_ACTION = "D"
    SEND_EMAIL = "M"
    SET_VARIABLE = "V"
    SUB_WORKFLOW = "F"
    USER_CHOICE = "C"
    USER_FORM = "X"
    USER_WINDOW = "W"
    USER_INFO_WINDOW = "I"
    WAIT_SLEEP = "Z"

    @property
    def label(self) -> str:
        return ACTION_LABELS[self]


ACTION_LABELS = {
    NodeAction.EXTERNAL_PROCESS: "Apps Process",
    NodeAction.EXTERNAL_REPORT: "Apps Report",
    NodeAction.EXTERNAL_TASK: "Apps Task",
    NodeAction.DOCUMENT_ACTION: "Document Action",
    NodeAction.SEND_EMAIL: "EMail",
    NodeAction.SET_VARIABLE: "Set Variable",
    NodeAction.SUB_WORKFLOW: "Sub Workflow",
    NodeAction.USER_CHOICE: "User Choice",
    NodeAction.USER_FORM: "User Form",
    NodeAction.USER_WINDOW: "User Window",
    NodeAction.USER_INFO_WINDOW: "User Info",
    NodeAction.WAIT_SLEEP: "Wait (Sleep)",
}


# ============================================================================
# LINKED ENTITY KINDS
# ============================================================================

class EntityKind(str, Enum):
    """
    Kinds of entity a node can be linked to

    Used to look up the first active candidate when a new node needs
    a mandatory link.
    """
    PROCESS = "process"
    TASK = "task"
    MAIL_TEMPLATE = "mail_template"
    COLUMN = "column"
    WORKFLOW = "workflow"
    FORM = "form"
    WINDOW = "window"
    INFO_WINDOW = "info_window"


# Node field populated for each entity kind
ENTITY_FIELDS = {
    EntityKind.PROCESS: "process_id",
    EntityKind.TASK: "task_id",
    EntityKind.MAIL_TEMPLATE: "mail_template_id",
    EntityKind.COLUMN: "column_id",
    EntityKind.WORKFLOW: "subflow_id",
    EntityKind.FORM: "form_id",
    EntityKind.WINDOW: "window_id",
    EntityKind.INFO_WINDOW: "info_window_id",
}

# Linked entity required by each action (document action needs none)
ACTION_REQUIREMENTS = {
    NodeAction.EXTERNAL_PROCESS: EntityKind.PROCESS,
    NodeAction.EXTERNAL_REPORT: EntityKind.PROCESS,
    NodeAction.EXTERNAL_TASK: EntityKind.TASK,
    NodeAction.SEND_EMAIL: EntityKind.MAIL_TEMPLATE,
    NodeAction.SET_VARIABLE: EntityKind.COLUMN,
    NodeAction.SUB_WORKFLOW: EntityKind.WORKFLOW,
    NodeAction.USER_CHOICE: EntityKind.COLUMN,
    NodeAction.USER_FORM: EntityKind.FORM,
    NodeAction.USER_WINDOW: EntityKind.WINDOW,
    NodeAction.USER_INFO_WINDOW: EntityKind.INFO_WINDOW,
}


# ============================================================================
# EDIT OUTCOMES
# ============================================================================

class EditStatus(str, Enum):
    """
    Outcome of a single edit

    APPLIED: All steps committed
    SKIPPED: Precondition unmet, nothing was written
    REFUSED: Persistence refused a delete, nothing was written
    """
    APPLIED = "applied"
    SKIPPED = "skipped"
    REFUSED = "refused"


# ============================================================================
# NODE MENU
# ============================================================================

class MenuAction(str, Enum):
    """
    Entries offered in a node's action menu
    """
    CLONE = "clone"
    ZOOM = "zoom"
    PROPERTIES = "properties"
    DELETE_NODE = "delete_node"
    ADD_LINE = "add_line"
    DELETE_LINE = "delete_line"
    INSERT_NODE = "insert_node"


# ============================================================================
# GRID LIMITS
# ============================================================================

class GridLimits:
    """
    Grid defaults and bounds
    """
    DEFAULT_COLUMNS = 4
    MIN_COLUMNS = 1
    COLUMN_SPACING = 2
    ROW_SPACING = 2
