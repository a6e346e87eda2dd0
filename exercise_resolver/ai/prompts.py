"""Prompt builders for the semantic and generative tiers."""


def semantic_mapping_prompt(exercise_name: str) -> str:
    return f"""Exercise: "{exercise_name}"

Find exactly 3 similar standard exercises that would be found in a typical exercise database.
Focus on exercises with common names like "push up", "squat", "deadlift", etc.
List the most likely match first.

Respond with JSON:
{{
  "alternatives": [
    {{"name": "exercise1", "confidence": 0.0 to 1.0, "reason": "brief explanation"}},
    {{"name": "exercise2", "confidence": 0.0 to 1.0, "reason": "brief explanation"}},
    {{"name": "exercise3", "confidence": 0.0 to 1.0, "reason": "brief explanation"}}
  ],
  "primaryMovement": "push|pull|squat|hinge|carry|rotation|isolation",
  "equipment": ["equipment1", "equipment2"]
}}"""


def generated_exercise_prompt(exercise_name: str) -> str:
    return f"""Exercise: "{exercise_name}"

Generate comprehensive exercise information.

Respond with JSON:
{{
  "name": "formatted exercise name",
  "description": "brief description",
  "instructions": ["step1", "step2", "step3", "step4", "step5", "step6"],
  "equipment": ["equipment needed"],
  "targetMuscles": ["primary muscles"],
  "safetyTips": ["safety tip1", "safety tip2", "safety tip3"],
  "alternatives": ["similar exercise1", "similar exercise2", "similar exercise3"]
}}

Use 5 or 6 instruction steps. Make alternatives use common exercise names found in standard databases."""
