"""
Results presentation.

Renders a scored submission for the student: a console summary, a Markdown
report and a JSON export. Presentation only reads TestResults; it never
re-derives correctness.
"""
import json
from pathlib import Path
from typing import Optional

from src.testmaxx import config
from src.testmaxx.models.attempt_models import TestResults, TopicScore
from src.testmaxx.models.question_models import Test


def performance_badge(percentage: int) -> str:
    if percentage >= config.OUTSTANDING_THRESHOLD:
        return "Excellent"
    if percentage >= config.GOOD_THRESHOLD:
        return "Good"
    if percentage >= config.ON_TRACK_THRESHOLD:
        return "Average"
    return "Needs Improvement"


def topic_band(performance: TopicScore) -> str:
    """Colour band of a topic bar: strong, fair or weak."""
    if performance.percentage >= config.TOPIC_STRONG_THRESHOLD:
        return "strong"
    if performance.percentage >= config.TOPIC_FAIR_THRESHOLD:
        return "fair"
    return "weak"


def format_duration(seconds: int) -> str:
    """Render a time taken as M:SS (minutes are not wrapped into hours)."""
    minutes, secs = divmod(max(int(seconds), 0), 60)
    return f"{minutes}:{secs:02d}"


def option_label(index: int) -> str:
    return chr(ord("A") + index)


class ResultsPresenter:
    """Render TestResults for a test."""

    def __init__(self, test: Test, results: TestResults):
        self.test = test
        self.results = results

    @property
    def badge(self) -> str:
        return performance_badge(self.results.percentage)

    def display_summary(self):
        """Print a summary of the results to the console."""
        results = self.results
        print("\n" + "="*70)
        print(f"TEST RESULTS: {self.test.title}")
        print(f"{self.test.subject} - Class {self.test.class_number}")
        print("="*70)

        print(f"\nQuestions Correct: {results.score}/{results.total_questions}")
        print(f"Score: {results.percentage}%")
        print(f"Time Taken: {format_duration(results.time_spent)}")
        print(f"Performance: {self.badge}")

        if results.topic_performance:
            print("\nTopic Performance:")
            for topic, performance in results.topic_performance.items():
                print(
                    f"  • {topic}: {performance.correct}/{performance.total} "
                    f"({performance.percentage}% correct)"
                )

        if results.suggestions:
            print("\nImprovement Suggestions:")
            for suggestion in results.suggestions:
                print(f"  • {suggestion}")

        print("\n" + "="*70 + "\n")

    def to_markdown(self) -> str:
        """Generate a Markdown report of the results."""
        results = self.results
        lines = [
            f"# Test Results: {self.test.title}",
            "",
            f"**Subject:** {self.test.subject}  ",
            f"**Class:** {self.test.class_number}",
            "",
            "## Summary",
            "",
            f"- **Questions Correct:** {results.score}/{results.total_questions}",
            f"- **Score:** {results.percentage}%",
            f"- **Time Taken:** {format_duration(results.time_spent)}",
            f"- **Performance:** {self.badge}",
            "",
        ]

        if results.topic_performance:
            lines += [
                "## Topic Performance",
                "",
                "| Topic | Correct | Total | % |",
                "|-------|---------|-------|---|",
            ]
            for topic, performance in results.topic_performance.items():
                lines.append(
                    f"| {topic} | {performance.correct} | {performance.total} | {performance.percentage}% |"
                )
            lines.append("")

        lines += ["## Improvement Suggestions", ""]
        lines += [f"- {suggestion}" for suggestion in results.suggestions]
        lines += ["", "## Question Analysis", ""]

        for number, result in enumerate(results.question_results, 1):
            status = "✓ Correct" if result.is_correct else "✗ Incorrect"
            lines.append(f"### Question {number} ({status})")
            lines.append("")
            lines.append(f"*{result.difficulty} • {result.topic}*")
            lines.append("")
            lines.append(result.question)
            lines.append("")

            if result.options is not None:
                for index, option in enumerate(result.options):
                    marker = ""
                    if index == result.correct_index:
                        marker = " **(Correct)**"
                    elif index == result.user_index and not result.is_correct:
                        marker = " *(Your Answer)*"
                    lines.append(f"- {option_label(index)}. {option}{marker}")
            else:
                lines.append(f"- **Your Answer:** {result.user_answer or 'No answer provided'}")
                if not result.is_correct:
                    lines.append(f"- **Correct Answer:** {result.correct_answer or ''}")

            if result.explanation:
                lines.append("")
                lines.append(f"> **Explanation:** {result.explanation}")
            lines.append("")

        return "\n".join(lines)

    def save_to_file(self, output_file: Optional[str] = None) -> Path:
        """
        Save the results as JSON.

        Args:
            output_file: Output path (defaults to output/<test id>_results.json)

        Returns:
            Path the results were written to
        """
        if output_file is None:
            output_file = Path(config.RESULTS_OUTPUT_DIR) / f"{self.test.id}_results.json"

        output_path = Path(output_file)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(self.results.model_dump(mode="json", by_alias=True), f,
                      indent=2, ensure_ascii=False)

        print(f"✓ Results saved to: {output_path}")
        return output_path
