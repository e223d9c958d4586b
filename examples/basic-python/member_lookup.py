"""Basic example: sign in, look up a member and watch the notification bell."""

import asyncio
import os

import structlog

from shepherd import ShepherdContext, ShepherdSettings
from shepherd.auth.session import Session, StaticIdentityProvider

logger = structlog.get_logger()


async def main() -> None:
    settings = ShepherdSettings()
    provider = StaticIdentityProvider()

    async with ShepherdContext(settings, provider) as ctx:
        # A real console gets these from the identity provider's login flow
        await provider.set_session(
            Session.signed_in(
                os.environ.get("SHEPHERD_EXAMPLE_USER", "user_demo"),
                primary_email="pastor@example.org",
                first_name="Demo",
                last_name="Pastor",
            ),
            token=os.environ.get("SHEPHERD_EXAMPLE_TOKEN"),
        )
        await ctx.session_sync.settle()
        logger.info("signed_in", user=ctx.session_sync.user, error=ctx.session_sync.error)

        search = ctx.new_member_search(on_select=lambda m: logger.info("member_selected", member=m.full_name))
        for text in ("j", "jo", "joh", "john"):
            search.set_query(text)
            await asyncio.sleep(0.05)
        await search.wait_idle()

        print(f"\n{len(search.results)} matches for {search.query!r}")
        for label in search.candidates:
            print(f"  {label}")
        if search.results:
            search.select(search.results[0])

        await asyncio.sleep(2.0)
        print(f"\nNotifications: {len(ctx.feed.notifications)} ({ctx.feed.unread_count} unread)")
        for notification in ctx.feed.notifications[:5]:
            marker = " " if notification.is_read else "*"
            print(f"  {marker} {notification.title}")

        await ctx.session_sync.sign_out()


if __name__ == "__main__":
    asyncio.run(main())
