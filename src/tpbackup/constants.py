DETECTION_START = 500  # initial upper bound for size estimation
CHUNK = 100  # page size of the full-fetch loop

# Default TargetProcess resources backed up when none are selected.
# "Context" is a special resource and "AgileReleaseTrains" is listed in the
# API reference but missing from live instances, so both are left out.
RESOURCES: tuple[str, ...] = (
    "Assignables",
    "AssignedEfforts",
    "Assignments",
    "Attachments",
    "Bugs",
    "Builds",
    "Comments",
    "Companies",
    "CustomActivities",
    "CustomFields",
    "CustomRules",
    "EntityPermissions",
    "EntityStates",
    "EntityTypes",
    "Epics",
    "Features",
    "Generals",
    "GeneralFollowers",
    "GeneralUsers",
    "GlobalSettings",
    "Impediments",
    "InboundAssignables",
    "Iterations",
    "Messages",
    "MessageUids",
    "Milestones",
    "MilestoneProjects",
    "OutboundAssignables",
    "PortfolioEpics",
    "Priorities",
    "Processes",
    "Programs",
    "Projects",
    "ProjectMembers",
    "Relations",
    "RelationTypes",
    "Releases",
    "ReleaseProjects",
    "Requests",
    "Requesters",
    "RequestTypes",
    "Revisions",
    "RevisionFiles",
    "Roles",
    "RoleEfforts",
    "RoleEntityTypes",
    "RoleEntityTypeProcessSettings",
    "Severities",
    "Tags",
    "Tasks",
    "Teams",
    "TeamAssignments",
    "TeamIterations",
    "TeamMembers",
    "TeamProjects",
    "Terms",
    "TestCases",
    "TestCaseRuns",
    "TestPlans",
    "TestPlanRuns",
    "TestRunItemHierarchyLinks",
    "TestSteps",
    "TestStepRuns",
    "Times",
    "Users",
    "UserStories",
    "Workflows",
)
