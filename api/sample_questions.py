"""
api/sample_questions.py — built-in sample set (Physics / Chemistry / Biology)
"""

from testprep_cbt.models.question_model import Question

SAMPLE_QUIZ_ID = "sample-mock"

SAMPLE_QUESTIONS: list[Question] = [
    Question(
        id="sample-1", subject="Physics",
        question_text="What is the SI unit of force?",
        options=["Joule", "Newton", "Pascal", "Watt"],
        correct_answer="Newton",
    ),
    Question(
        id="sample-2", subject="Physics",
        question_text="A body moving with uniform velocity has an acceleration of:",
        options=["Zero", "Constant non-zero", "Increasing", "Decreasing"],
        correct_answer="Zero",
    ),
    Question(
        id="sample-3", subject="Physics",
        question_text="Which quantity is conserved in an elastic collision but not in an inelastic one?",
        options=["Momentum", "Mass", "Kinetic energy", "Charge"],
        correct_answer="Kinetic energy",
    ),
    Question(
        id="sample-4", subject="Chemistry",
        question_text="What is the atomic number of carbon?",
        options=["4", "6", "8", "12"],
        correct_answer="6",
    ),
    Question(
        id="sample-5", subject="Chemistry",
        question_text="The pH of a neutral aqueous solution at 25 °C is:",
        options=["0", "1", "7", "14"],
        correct_answer="7",
    ),
    Question(
        id="sample-6", subject="Chemistry",
        question_text="Which gas is evolved when zinc reacts with dilute hydrochloric acid?",
        options=["Oxygen", "Hydrogen", "Chlorine", "Carbon dioxide"],
        correct_answer="Hydrogen",
    ),
    Question(
        id="sample-7", subject="Biology",
        question_text="Which organelle is known as the powerhouse of the cell?",
        options=["Ribosome", "Golgi apparatus", "Mitochondrion", "Lysosome"],
        correct_answer="Mitochondrion",
    ),
    Question(
        id="sample-8", subject="Biology",
        question_text="Photosynthesis takes place in the:",
        options=["Nucleus", "Chloroplast", "Vacuole", "Cell wall"],
        correct_answer="Chloroplast",
    ),
    Question(
        id="sample-9", subject="Biology",
        question_text="The functional unit of the kidney is the:",
        options=["Neuron", "Nephron", "Alveolus", "Villus"],
        correct_answer="Nephron",
    ),
    Question(
        id="sample-10", subject="Biology",
        question_text="Which blood cells are primarily responsible for immunity?",
        options=["Red blood cells", "Platelets", "White blood cells", "Plasma cells only"],
        correct_answer="White blood cells",
    ),
]
