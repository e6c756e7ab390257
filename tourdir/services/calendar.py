from ics import Calendar, Event
from tourdir.models.domain import ItinerarySummary
from datetime import datetime, timedelta
import pytz


def generate_ics(summary: ItinerarySummary, tz_name: str = "UTC") -> bytes:
    """
    Generates an iCalendar (.ics) file content from an itinerary summary.
    Every day becomes an all-day event; timed items become timed events in tz_name.
    Items without a start time are only listed in the day's description.
    """
    tz = pytz.timezone(tz_name)
    title = summary.itinerary.title
    cal = Calendar()

    for day in summary.days:
        # All-day summary event for the day
        summary_event = Event()
        summary_event.name = f"Day {day.day_number}: {title}"
        summary_event.begin = datetime.combine(day.date, datetime.min.time())
        summary_event.make_all_day()
        lines = [day.notes] if day.notes else []
        for item in day.items:
            when = item.start_time.strftime("%H:%M") if item.start_time else "Anytime"
            lines.append(f"{when} - {item.title}")
        summary_event.description = "\n".join(lines)
        cal.events.add(summary_event)

        for item in day.items:
            if item.start_time is None:
                continue

            event = Event()
            event.name = item.title
            begin = tz.localize(datetime.combine(day.date, item.start_time))
            if item.end_time is not None:
                end = tz.localize(datetime.combine(day.date, item.end_time))
                # Overnight transfers end on the next calendar day
                if end <= begin:
                    end += timedelta(days=1)
            else:
                end = begin + timedelta(hours=1)
            event.begin = begin
            event.end = end

            details = [item.description] if item.description else []
            if item.cost is not None:
                details.append(f"Cost: ${item.cost}")
            if item.reservation_confirmation:
                details.append(f"Confirmation: {item.reservation_confirmation}")
            event.description = "\n".join(details)
            if item.location:
                event.location = item.location

            cal.events.add(event)

    return cal.serialize().encode("utf-8")
