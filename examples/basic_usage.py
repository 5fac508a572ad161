"""Basic usage examples for partyviews."""

from partyviews import ProfileService
from partyviews.core.models import Delta, IssueOp, SurveyAnswer
from partyviews.core.compass import project
from partyviews.services.cooldown import CooldownGate
from partyviews.services.store import ViewsStore


def example_member_profile(service):
    """Example: Build one member's profile from a survey and a chat analysis."""
    print("🗳️  Building a member profile")

    answers = [
        SurveyAnswer(question_id="1", choice="Raise taxes on the wealthy"),
        SurveyAnswer(question_id="2", choice="Build more council homes", text="Rent takes half my wages"),
    ]
    snapshot = service.create_baseline("user-0001", answers)
    print(f"📋 Baseline economy score: {snapshot.pillars['economy'].score}")

    delta = Delta(
        pillars_delta={"economy": -8, "environment": -3},
        top_issues_delta=[IssueOp("add", "Housing Crisis", "Rent is too high", mentions=3, quote="Rent takes half my wages")],
    )
    snapshot = service.apply_delta("user-0001", delta)
    point = project(snapshot)
    print(f"🧭 Compass position: x={point.x:.0f}, y={point.y:.0f}")
    for issue in snapshot.top_issues:
        print(f"  • {issue.title}: {issue.summary}")


def example_party_aggregate(service):
    """Example: Refresh the party-wide aggregate."""
    print("\n🏛️  Refreshing the party aggregate")

    service.apply_analysis("user-0002", {
        "pillar_deltas": {"economy": 6, "foreign": 4},
        "top_issues": [{"issue": "housing crisis", "mentions": 5, "user_quote": "No one my age can buy"}],
    })
    reply = service.record_exchange(
        "user-0002",
        "Housing is the only thing anyone talks about",
        "It comes up a lot. [[topic: housing; confidence: 0.9]]",
    )
    print(f"💬 {reply}")

    aggregate = service.refresh_aggregate(requested_by="user-0002")
    print(f"👥 Members: {aggregate.member_count}")
    for axis, mean in aggregate.pillar_means.items():
        print(f"  {axis}: {mean:.1f}")
    for issue in aggregate.top_issues[:5]:
        print(f"🔥 {issue.title} ({issue.mentions} mentions from {issue.count} members)")
    print(f"🏆 Top contributor: {aggregate.top_contributor.display_name} ({aggregate.top_contributor.score})")
    print(f"📝 {aggregate.party_summary}")


if __name__ == "__main__":
    service = ProfileService(ViewsStore(), cooldown=CooldownGate(global_cooldown=0, user_cooldown=0))
    example_member_profile(service)
    example_party_aggregate(service)
