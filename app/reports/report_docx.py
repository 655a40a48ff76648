from docx import Document


def generate_results_docx(report: dict, file_path: str):
    doc = Document()

    # Title
    doc.add_heading(report["form_title"] or "Form Results", level=1)
    if report.get("submitter"):
        doc.add_paragraph(f"Submitted by: {report['submitter']}")
    if report.get("submitted_at"):
        doc.add_paragraph(f"Submitted at: {report['submitted_at']}")

    # Summary
    doc.add_heading("Summary", level=2)
    for line in report["summary"]:
        doc.add_paragraph(line)

    # Scores
    scores = report["scores"]
    doc.add_heading("Overall Score", level=2)
    doc.add_paragraph(
        f"Score: {scores['correct_count']} / {scores['total_questions']} "
        f"({scores['percentage']}%)"
    )
    doc.add_paragraph(f"Band: {scores['band']}")

    # Questions
    if report["questions"]:
        doc.add_heading("Question Breakdown", level=2)
        table = doc.add_table(rows=1, cols=4)
        header = table.rows[0].cells
        header[0].text = "Question"
        header[1].text = "Your Answer"
        header[2].text = "Correct Answer"
        header[3].text = "Result"
        for q in report["questions"]:
            cells = table.add_row().cells
            cells[0].text = q["label"]
            cells[1].text = q["user_answer"]
            cells[2].text = q["correct_answer"]
            cells[3].text = "Correct" if q["is_correct"] else "Incorrect"

    doc.save(file_path)


def generate_analytics_docx(report: dict, file_path: str):
    doc = Document()

    doc.add_heading(report["form_title"], level=1)
    doc.add_paragraph(f"Total Submissions: {report['total_submissions']}")

    if not report["charts"]:
        doc.add_paragraph("No Analytics Data Available")

    for chart in report["charts"]:
        doc.add_heading(chart["label"], level=2)
        doc.add_paragraph(f"{chart['total_responses']} responses ({chart['type']})")
        for row in chart["rows"]:
            doc.add_paragraph(
                f"{row['name']}: {row['count']} ({row['percentage']}%)",
                style="List Bullet",
            )

    doc.save(file_path)
