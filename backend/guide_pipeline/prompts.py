"""Prompts for LLM-based guide and step image generation"""
from guide_pipeline.types import QuizAnswers


GUIDE_JSON_SHAPE = """{
  "title": "Descriptive Project Title",
  "overview": "Brief 2-3 sentence project overview explaining the transformation",
  "difficulty": "Beginner|Intermediate|Advanced",
  "estimated_time": "Total time estimate (e.g., '2-3 days', '4-6 hours')",
  "environmental_score": 4.2,
  "materials_list": ["material1", "material2", "material3"],
  "recyclables_used": "How the recyclable materials are reused in this project",
  "steps": [
    {
      "step_number": 1,
      "title": "Step Title",
      "description": "Detailed step description with safety tips and specific instructions",
      "tools_needed": ["tool1", "tool2"],
      "materials_needed": ["material1", "material2"],
      "estimated_time": "30 minutes",
      "image_prompt": "Photorealistic description of what the furniture looks like at the end of this step"
    }
  ]
}"""


def _join(values, empty: str = 'Not specified') -> str:
    values = [v for v in values if v]
    return ', '.join(values) if values else empty


def build_guide_prompt(quiz: QuizAnswers) -> str:
    """Build the user prompt for guide generation"""
    color = quiz.color_vibe or 'Not specified'
    if quiz.custom_color:
        color = f"{color} (Custom: {quiz.custom_color})"

    recyclables = _join(quiz.recyclables, empty='None')
    if quiz.custom_recyclables:
        recyclables = f"{recyclables} (Custom: {quiz.custom_recyclables})"

    budget = f"${quiz.budget:g}" if quiz.budget is not None else 'Not specified'
    idea = quiz.initial_idea or 'None provided'

    return f"""Create a detailed DIY furniture upcycling guide based on the following information:

Furniture Type: {quiz.furniture_type or 'Not specified'}
Size: {quiz.size or 'Not specified'}
Current Condition: {quiz.condition or 'Not specified'}
Target Rooms: {_join(quiz.rooms)}
Desired Style: {quiz.style or 'Not specified'}
Color Preference: {color}
Available Materials: {_join(quiz.materials)}
Available Tools: {_join(quiz.tools)}
Budget: {budget}
Additional Features: {_join(quiz.addons, empty='None')}
Recyclable Materials: {recyclables}
Initial Idea: {idea}

Please create a comprehensive step-by-step guide with the following requirements:
1. Each step should have a clear title and detailed description (2-3 sentences minimum)
2. List specific tools and materials needed for each step
3. Provide realistic time estimates for each step
4. Include safety tips where relevant
5. Make it beginner-friendly but thorough
6. Create 5-8 logical steps that flow naturally
7. Consider the user's available tools and budget constraints
8. Incorporate any recyclable materials creatively
9. Match the desired style and color preferences
10. Rate the environmental impact from 1.0 (low benefit) to 5.0 (high benefit)
11. For every step write an "image_prompt" describing a photo of the piece at that stage

Return the response as a valid JSON object with this exact structure:
{GUIDE_JSON_SHAPE}

Important: Return ONLY the JSON object, no additional text or formatting."""


def build_image_prompt(step_prompt: str, quiz: QuizAnswers) -> str:
    """Enhance a step's image prompt with the chosen style and furniture type"""
    parts = [step_prompt.strip()]
    if quiz.style:
        parts.append(f"{quiz.style} style")
    if quiz.furniture_type:
        parts.append(quiz.furniture_type)
    parts.append("high quality DIY workshop photo, natural lighting")
    return ', '.join(parts)
