from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]


# -----------------------------------------------------
# ROLE
# -----------------------------------------------------
class Role(BaseStrEnum):
    """Account type assigned at sign-up. Fixed for the whole session."""

    ADMIN = "ADMIN"
    ECO_DEFENDER = "ECO_DEFENDER"
    TRASH_HERO = "TRASH_HERO"
    IMPACT_WARRIOR = "IMPACT_WARRIOR"


# -----------------------------------------------------
# CAPABILITY ("feature")
# -----------------------------------------------------
class Capability(BaseStrEnum):
    """Opaque named permission. A role either holds it or it does not."""

    # Admin
    MANAGE_USERS = "ManageUsers"
    POST_MISSIONS = "PostMissions"
    VIEW_ANALYTICS = "ViewAnalytics"
    RESOLVE_ISSUES = "ResolveIssues"
    MANAGE_REWARDS = "ManageRewards"
    VIEW_ALL_DATA = "ViewAllData"
    SYSTEM_SETTINGS = "SystemSettings"
    ISSUE_RESOLUTION = "IssueResolution"
    USER_MANAGEMENT = "UserManagement"
    MISSION_CONTROL = "MissionControl"
    SUGGESTED_SPOTS = "SuggestedSpots"
    PLATFORM_ANALYTICS = "PlatformAnalytics"

    # Eco Defender
    POST_JOBS = "PostJobs"
    FUND_CLEANUPS = "FundCleanups"
    TRACK_IMPACT = "TrackImpact"
    MANAGE_BUSINESS_PROFILE = "ManageBusinessProfile"
    POST_JOB = "PostJob"
    ECO_DEFENDER_IMPACT = "EcoDefenderImpact"
    BUSINESS_DASHBOARD = "BusinessDashboard"

    # Shared by field roles
    VIEW_MISSIONS = "ViewMissions"
    COMPLETE_JOBS = "CompleteJobs"
    EARN_BADGES = "EarnBadges"

    # Trash Hero
    VIEW_EARNINGS = "ViewEarnings"
    WITHDRAW_EARNINGS = "WithdrawEarnings"
    TRASH_HERO_MISSIONS = "TrashHeroMissions"
    TRASH_HERO_EARNINGS = "TrashHeroEarnings"
    PROFESSIONAL_CLEANUP = "ProfessionalCleanup"

    # Impact Warrior
    REPORT_ISSUES = "ReportIssues"
    IMPACT_WARRIOR_MISSIONS = "ImpactWarriorMissions"
    IMPACT_WARRIOR_IMPACT = "ImpactWarriorImpact"
    COMMUNITY_VOLUNTEER = "CommunityVolunteer"
    SUGGEST_CLEANUP = "SuggestCleanup"


# -----------------------------------------------------
# GUARD OUTCOME
# -----------------------------------------------------
class GuardOutcome(BaseStrEnum):
    """What the caller should render after a guard evaluation."""

    granted = "granted"      # protected content
    fallback = "fallback"    # caller-supplied fallback view
    denied = "denied"        # built-in access-denied explanation
    hidden = "hidden"        # render nothing
