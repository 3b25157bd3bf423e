"""The Codetrain curriculum: subjects, their weeks and the topics of each week.

The declaration order is the unlock order. A roadmap week is identified by
``"{subject title}-{week title}"``.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Topic:
    id: str
    title: str


@dataclass(frozen=True)
class RoadmapWeek:
    title: str
    topics: tuple[Topic, ...] = ()


@dataclass(frozen=True)
class RoadmapSubject:
    title: str
    duration: str
    weeks: tuple[RoadmapWeek, ...] = field(default_factory=tuple)


def _week(title: str, *topics: tuple[str, str]) -> RoadmapWeek:
    return RoadmapWeek(title=title, topics=tuple(Topic(id=i, title=t) for i, t in topics))


ROADMAP: tuple[RoadmapSubject, ...] = (
    RoadmapSubject("HTML", "2 weeks", (
        _week(
            "Week 1",
            ("html-1-1", "Basic html structure"),
            ("html-1-2", "Html elements"),
            ("html-1-3", "Html attributes"),
            ("html-1-4", "Content (p, link, img, headings, lists)"),
            ("html-1-5", "Comments"),
        ),
        _week(
            "Week 2",
            ("html-2-1", "Tables"),
            ("html-2-2", "Classes and id"),
            ("html-2-3", "Div/section"),
            ("html-2-4", "Forms"),
        ),
    )),
    RoadmapSubject("CSS", "2 weeks", (
        _week(
            "Week 1",
            ("css-1-1", "Css syntax"),
            ("css-1-2", "Selectors (element, id, class, combination)"),
            ("css-1-3", "Css properties (color, width, height, background, border, margin, padding, fonts, display)"),
        ),
        _week(
            "Week 2",
            ("css-2-1", "Box model"),
            ("css-2-2", "Float"),
            ("css-2-3", "Flexbox"),
        ),
    )),
    RoadmapSubject("Tailwind", "4 weeks", (
        _week("Week 1", ("tailwind-1-1", "Responsive design"), ("tailwind-1-2", "Grid system")),
        _week("Week 2", ("tailwind-2-1", "Components")),
        _week(
            "Week 3",
            ("tailwind-3-1", "Calculator project (in class)"),
            ("tailwind-3-2", "Horizons website (homework)"),
        ),
        _week(
            "Week 4",
            ("tailwind-4-1", "Shopping Cart (in class)"),
            ("tailwind-4-2", "Kawolegal (homework)"),
        ),
    )),
    RoadmapSubject("Git", "2 weeks", (
        _week(
            "Week 1",
            ("git-1-1", "Installing git"),
            ("git-1-2", "Initialize git in repo"),
            ("git-1-3", "Staging"),
            ("git-1-4", "Committing"),
        ),
        _week("Week 2", ("git-2-1", "Pushing"), ("git-2-2", "Branching"), ("git-2-3", "Pulling")),
    )),
    RoadmapSubject("JS", "5 weeks", (
        _week(
            "Week 1",
            ("js-1-1", "Output (console.log, document.write)"),
            ("js-1-2", "Variables (var, let, const)"),
            ("js-1-3", "Data types (string, float, int, bool)"),
            ("js-1-4", "Arithmetic operators (+, -, x, %)"),
            ("js-1-5", "Comparisons (==, ===, !=, !==, >, <, >=, <=)"),
            ("js-1-6", "Logical operators (AND, OR, NOT, ||, &&)"),
        ),
        _week(
            "Week 2",
            ("js-2-1", "Arrays"),
            ("js-2-2", "Conditionals (if, else, else if, switch)"),
            ("js-2-3", "Loops (for, while, map)"),
        ),
        _week(
            "Week 3",
            ("js-3-1", "Functions(plain old functions, Arrow functions)"),
            ("js-3-2", "Objects"),
        ),
        _week("Week 4", ("js-4-1", "OOP"), ("js-4-2", "Scope (this keyword)")),
        _week(
            "Week 5",
            ("js-5-1", "JS Q&A, JS overview"),
            ("js-5-2", "JS simple algorithms"),
            ("js-5-3", "DOM manipulation"),
        ),
    )),
    RoadmapSubject("Data Structures and Algorithms", "3 weeks", (
        _week(
            "Data structures in JS",
            ("ds-1-1", "Arrays(stack,queue)"),
            ("ds-1-2", "Push, Pop, slice, splice"),
            ("ds-1-3", "objects, classes"),
        ),
        _week(
            "Algorithms",
            ("ds-2-1", "Big O notation"),
            ("ds-2-2", "Sort algorithms(bubble sort / quick sort)(intermediate)"),
            ("ds-2-3", "Search algorithms(linear search,/ binary search)(intermediate)"),
            ("ds-2-4", "List of even/odd/prime numbers (basic)"),
            ("ds-2-5", "Sum of even/odd/prime numbers(basic)"),
            ("ds-2-6", "Search and replace (intermediate)"),
        ),
    )),
    RoadmapSubject("React", "12 weeks", (
        _week(
            "Week 1",
            ("react-1-1", "Overview of React and SPAs"),
            ("react-1-2", "Installing package managers (NPM, Yarn)"),
            ("react-1-3", "Create React App (CRA)"),
        ),
        _week(
            "Week 2",
            ("react-2-1", "Js import/export"),
            ("react-2-2", "How react server works (yarn start / npm start)"),
            ("react-2-3", "JSX"),
            ("react-2-4", "Styling in React (inline, external)"),
            ("react-2-5", "Components (and Destructuring)"),
            ("react-2-6", "Props"),
        ),
        _week(
            "Week 3",
            ("react-3-1", "Breaking content into components, how to link bootstrap (using the Pizza website)"),
            ("react-3-2", "Passing props to replace hard coded text and content"),
        ),
        _week(
            "Week 4",
            ("react-4-1", "Events (onClick, onChange)"),
            ("react-4-2", "State (and spread operator) - counter example using both class and function components."),
            ("react-4-3", "Forms ( simple form with multiple inputs to collect data into the state. "
                          "On submit, we log the values in the state to confirm that form works)"),
        ),
        _week("Week 5", ("react-5-1", "CRUD Project 1 (create, retrieve) - add users/see users project")),
        _week("Week 6", ("react-6-1", "CRUD Project 2 (update, delete) - update users/delete users")),
        _week(
            "Week 7",
            ("react-7-1", "Routing (react router, links, routes, route params)"),
            ("react-7-2", "Kawolegal website project (assignment)"),
        ),
        _week("Week 8", ("react-8-1", "Making API requests (in functional components using fetch or axios)")),
        _week("Week 9", ("react-9-1", "Redux intro (flux architecture, setup - store, reducers, actions )")),
        _week(
            "Week 10",
            ("react-10-1", "Redux (connect to components, mapStateToProps, MapDispatchToProps - "
                           "create and retrieve) - Bank account project (assignment)"),
        ),
        _week(
            "Week 11",
            ("react-11-1", "Redux (edit and delete) - continue Bank account management project (assignment)"),
        ),
        _week("Week 12", ("react-12-1", "React Project(CRUD application with redux - Notes project)")),
    )),
    RoadmapSubject("Firebase", "3 weeks", (
        _week(
            "Week 1-3",
            ("firebase-1-1", "Firebase connection"),
            ("firebase-1-2", "Firebase database / cloud firestore (CRUD)"),
            ("firebase-1-3", "Firebase authentication"),
        ),
    )),
    RoadmapSubject("React Native", "8 weeks", (
        _week(
            "Week 1",
            ("rn-1-1", "Setup React Native (install expo cli)"),
            ("rn-1-2", "Basic Components (Text, View)"),
            ("rn-1-3", "React Native Styles (Stylesheet.Create, flexbox)"),
            ("rn-1-4", "Available Core Library Components (Image, ImageBackground, Modal)"),
        ),
        _week(
            "Week 2",
            ("rn-2-1", "Forms and Buttons (TextInput, TouchableOpacity, KeyboardAvoidingView, SafeAreaView, Validation)"),
            ("rn-2-2", "Displaying List (FlatList, ScrollView)"),
        ),
        _week("Week 3", ("rn-3-1", "Onboarding project exercise"), ("rn-3-2", "Ecommerce app assignment")),
        _week(
            "Week 4",
            ("rn-4-1", "Routing with React Navigation (Stack)"),
            ("rn-4-2", "React native blog app"),
        ),
        _week(
            "Week 5",
            ("rn-5-1", "Ampersand contact app first 4 screens as exercise"),
            ("rn-5-2", "Ampersand contact app last 4 screens as assignment"),
        ),
        _week(
            "Week 6",
            ("rn-6-1", "Redux"),
            ("rn-6-2", "Firebase"),
            ("rn-6-3", "Authentication"),
            ("rn-6-4", "Add authentication to form and list project from week 2"),
            ("rn-6-5", "React Native Project (Ampersand project) - add authentication as assignment"),
        ),
        _week("Week 7", ("rn-7-1", "How react native works under the hood"), ("rn-7-2", "Wrap up")),
    )),
    RoadmapSubject("Backend - NodeJS", "9 weeks", (
        _week(
            "Week 1",
            ("node-1-1", "Setup a basic node server with http package"),
            ("node-1-2", "Learn request-response cycle and objects"),
            ("node-1-3", "Headers - content-type, accept,"),
            ("node-1-4", "body,"),
            ("node-1-5", "Methods - post, get, put, patch,"),
            ("node-1-6", "Url"),
            ("node-1-7", "Status codes - 200, 404, 500"),
            ("node-1-8", "Implement routing on the request objects url"),
            ("node-1-9", "Sending responses"),
        ),
        _week(
            "Week 2",
            ("node-2-1", "Npm and package.json"),
            ("node-2-2", "Setup node server with express"),
            ("node-2-3", "Routing with app.use(), app.get(), app.post()"),
            ("node-2-4", "Implement response.send()"),
        ),
        _week(
            "Week 3",
            ("node-3-1", "Middlewares - the next() method"),
            ("node-3-2", "General middlewares"),
            ("node-3-3", "Route middlewares"),
            ("node-3-4", "Serving static files - express.static middleware"),
            ("node-3-5", "Parsing request objects - body-parser middleware"),
        ),
        _week(
            "Week 4",
            ("node-4-1", "Postman"),
            ("node-4-2", "REST architecture"),
            ("node-4-3", "Getting organized - controllers, routes, models"),
        ),
        _week("Week 5", ("node-5-1", "Databases - SQL and NoSQL"), ("node-5-2", "Setting up Mongodb")),
        _week(
            "Week 6",
            ("node-6-1", "Mongoose core - schema, models, queries"),
            ("node-6-2", "Setup mongoose for node"),
            ("node-6-3", "Mongoose models"),
            ("node-6-4", "Create and Retrieve data with mongoose"),
        ),
        _week(
            "Week 7",
            ("node-7-1", "Update and Delete data with mongoose"),
            ("node-7-2", "Relationships in mongoose"),
            ("node-7-3", "Fetching relational data"),
            ("node-7-4", "Delete relational data"),
        ),
        _week("Week 8", ("node-8-1", "validation - express validator?")),
        _week(
            "Week 9",
            ("node-9-1", "Authentication"),
            ("node-9-2", "Sign up"),
            ("node-9-3", "Sign in"),
            ("node-9-4", "Tokens and authorizations"),
            ("node-9-5", "Jwt - sign , verify , decode"),
            ("node-9-6", "Route protection"),
        ),
    )),
    RoadmapSubject("Final Project", "4 weeks", ()),
)
