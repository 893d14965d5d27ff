"""Prompt text for itinerary generation."""

from __future__ import annotations

SYSTEM_INSTRUCTION = (
  "You are a professional travel planner with extensive knowledge of destinations worldwide. "
  "You create detailed, practical itineraries that balance must-see attractions with authentic local experiences. "
  "Always respond with valid JSON only."
)

_EXAMPLE_DESCRIPTION = (
  "Visit the world-renowned Louvre Museum. Book timed entry tickets online in advance to skip the lines. "
  "Allow 3-4 hours minimum. The museum opens at 9 AM - arrive early for smaller crowds."
)


def build_itinerary_prompt(destination: str, duration_days: int) -> str:
  """Render the user prompt asking for a JSON array of days."""
  return f"""Create a detailed {duration_days}-day travel itinerary for {destination}.

CRITICAL REQUIREMENTS:
1. Return ONLY valid JSON - no additional text, explanations, or markdown
2. Follow the exact structure specified below
3. Include exactly {duration_days} days, numbered from 1 to {duration_days}
4. Each day must have exactly 3 activities: Morning, Afternoon, and Evening (one of each)
5. Provide specific, actionable descriptions with practical tips
6. Include real location names and addresses when possible

REQUIRED JSON STRUCTURE:
[
  {{
    "day": 1,
    "theme": "Brief descriptive theme for the day (e.g., 'Historical Exploration')",
    "activities": [
      {{"time": "Morning", "description": "Detailed activity description with practical tips.", "location": "Specific location name with area/district"}},
      {{"time": "Afternoon", "description": "Detailed activity description with practical tips.", "location": "Specific location name with area/district"}},
      {{"time": "Evening", "description": "Detailed activity description including dining recommendations.", "location": "Specific location name with area/district"}}
    ]
  }}
]

CONTENT GUIDELINES:
- Mix famous attractions with authentic local experiences
- Consider logical geographical flow to minimize travel time
- Include practical details like opening hours and booking requirements
- Suggest specific restaurants, cafes, or food experiences
- Account for cultural norms and local customs
- Include transportation tips between locations

EXAMPLE ACTIVITY DESCRIPTION:
"{_EXAMPLE_DESCRIPTION}"

Remember: Return ONLY the JSON array, exactly as specified above."""
